"""Initial schema: users, favorites, and search history."""

import sqlite3

DDL = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,

    # Saved cities, compared case-insensitively on (city, country)
    """
    CREATE TABLE IF NOT EXISTS favorites (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        city TEXT NOT NULL,
        country TEXT NOT NULL DEFAULT '',
        last_searched_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_favorites_user ON favorites(user_id)",

    # Capped per user by history_repo.append_history
    """
    CREATE TABLE IF NOT EXISTS search_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        city TEXT NOT NULL,
        country TEXT NOT NULL DEFAULT '',
        last_searched_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_search_history_user ON search_history(user_id)",
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
