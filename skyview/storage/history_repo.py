"""Repository for per-user search history, capped to the most recent entries."""

import sqlite3

from skyview.models.common import UserId, utc_now_iso
from skyview.models.user import SavedCity

DEFAULT_HISTORY_LIMIT = 20


def append_history(
    conn: sqlite3.Connection,
    user_id: UserId,
    city: str,
    country: str = "",
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> int:
    """Append an entry and trim to the newest `limit` in one transaction.

    Returns the new row id.
    """
    with conn:
        cursor = conn.execute(
            "INSERT INTO search_history (user_id, city, country, last_searched_at) "
            "VALUES (?, ?, ?, ?)",
            (user_id, city, country, utc_now_iso()),
        )
        conn.execute(
            "DELETE FROM search_history WHERE user_id = ? AND id NOT IN ("
            "  SELECT id FROM search_history WHERE user_id = ? "
            "  ORDER BY id DESC LIMIT ?"
            ")",
            (user_id, user_id, limit),
        )
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def list_history(conn: sqlite3.Connection, user_id: UserId) -> list[SavedCity]:
    """History oldest first, matching append order."""
    rows = conn.execute(
        "SELECT id, city, country, last_searched_at FROM search_history "
        "WHERE user_id = ? ORDER BY id",
        (user_id,),
    ).fetchall()
    return [
        SavedCity(
            id=r["id"],
            city=r["city"],
            country=r["country"],
            last_searched_at=r["last_searched_at"],
        )
        for r in rows
    ]
