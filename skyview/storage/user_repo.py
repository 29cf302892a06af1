"""Repository for user accounts."""

import sqlite3

from skyview.models.common import UserId, utc_now_iso
from skyview.models.user import User


def create_user(
    conn: sqlite3.Connection, name: str, email: str, password_hash: str
) -> User:
    """Insert a user. Raises sqlite3.IntegrityError if the email is taken."""
    now = utc_now_iso()
    cursor = conn.execute(
        "INSERT INTO users (name, email, password_hash, created_at, updated_at) "
        "VALUES (?, ?, ?, ?, ?)",
        (name.strip(), email.strip().lower(), password_hash, now, now),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    user = get_user(conn, cursor.lastrowid)
    assert user is not None
    return user


def get_user(conn: sqlite3.Connection, user_id: UserId) -> User | None:
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _to_user(row)


def get_user_by_email(conn: sqlite3.Connection, email: str) -> User | None:
    """Emails are stored lowercased; lookup is case-insensitive."""
    row = conn.execute(
        "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
    ).fetchone()
    return _to_user(row)


def _to_user(row: sqlite3.Row | None) -> User | None:
    if row is None:
        return None
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=row["created_at"],
    )
