"""Repository for a user's favorite cities."""

import sqlite3

from skyview.models.common import UserId, utc_now_iso
from skyview.models.user import SavedCity


def list_favorites(conn: sqlite3.Connection, user_id: UserId) -> list[SavedCity]:
    rows = conn.execute(
        "SELECT id, city, country, last_searched_at FROM favorites "
        "WHERE user_id = ? ORDER BY id",
        (user_id,),
    ).fetchall()
    return [_to_saved_city(r) for r in rows]


def find_favorite(
    conn: sqlite3.Connection, user_id: UserId, city: str, country: str = ""
) -> SavedCity | None:
    """Match on city and country, ignoring case."""
    row = conn.execute(
        "SELECT id, city, country, last_searched_at FROM favorites "
        "WHERE user_id = ? AND lower(city) = lower(?) AND lower(country) = lower(?)",
        (user_id, city, country),
    ).fetchone()
    return _to_saved_city(row) if row is not None else None


def add_favorite(
    conn: sqlite3.Connection, user_id: UserId, city: str, country: str = ""
) -> SavedCity:
    cursor = conn.execute(
        "INSERT INTO favorites (user_id, city, country, last_searched_at) "
        "VALUES (?, ?, ?, ?)",
        (user_id, city, country, utc_now_iso()),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    favorite = get_favorite(conn, user_id, cursor.lastrowid)
    assert favorite is not None
    return favorite


def get_favorite(
    conn: sqlite3.Connection, user_id: UserId, favorite_id: int
) -> SavedCity | None:
    row = conn.execute(
        "SELECT id, city, country, last_searched_at FROM favorites "
        "WHERE user_id = ? AND id = ?",
        (user_id, favorite_id),
    ).fetchone()
    return _to_saved_city(row) if row is not None else None


def delete_favorite(conn: sqlite3.Connection, user_id: UserId, favorite_id: int) -> bool:
    """Delete one favorite. Returns False if it did not exist for this user."""
    cursor = conn.execute(
        "DELETE FROM favorites WHERE user_id = ? AND id = ?", (user_id, favorite_id)
    )
    conn.commit()
    return cursor.rowcount > 0


def _to_saved_city(row: sqlite3.Row) -> SavedCity:
    return SavedCity(
        id=row["id"],
        city=row["city"],
        country=row["country"],
        last_searched_at=row["last_searched_at"],
    )
