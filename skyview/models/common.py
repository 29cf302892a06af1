"""Common types and helpers shared across models."""

import time
from datetime import UTC, datetime
from typing import TypeAlias

UserId: TypeAlias = int


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def epoch_now() -> int:
    return int(time.time())


def drop_absent(data: dict) -> dict:
    """Remove keys whose value is None so absent fields serialize as missing."""
    return {k: v for k, v in data.items() if v is not None}
