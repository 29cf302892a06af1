"""User account and saved-city models."""

from dataclasses import dataclass

from skyview.models.common import UserId


@dataclass(frozen=True)
class User:
    id: UserId
    name: str
    email: str
    password_hash: str
    created_at: str

    def public_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class SavedCity:
    """A favorite or search-history entry."""

    id: int
    city: str
    country: str
    last_searched_at: str  # ISO-8601

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "city": self.city,
            "country": self.country,
            "lastSearchedAt": self.last_searched_at,
        }
