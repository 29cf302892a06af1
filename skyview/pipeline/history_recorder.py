"""Records a user's searches after the weather payload has been produced."""

import logging
import sqlite3
from pathlib import Path

from skyview.models.common import UserId
from skyview.storage import history_repo
from skyview.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)


class HistoryRecorder:
    """Opens its own connection per call so it can run as a background task."""

    def __init__(
        self,
        db_path: str | Path,
        max_entries: int = history_repo.DEFAULT_HISTORY_LIMIT,
    ):
        self.db_path = db_path
        self.max_entries = max_entries

    def record(self, user_id: UserId, city: str | None, country: str | None) -> bool:
        """Append to the user's history. Failures are logged, never raised."""
        if not city:
            return False
        try:
            conn = connect(self.db_path)
            try:
                run_migrations(conn)
                history_repo.append_history(
                    conn, user_id, city, country or "", limit=self.max_entries
                )
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Failed to record history for user %s (%s)", user_id, city)
            return False
        return True
