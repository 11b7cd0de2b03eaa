"""Signed-in user model."""

from dataclasses import dataclass


@dataclass
class AppUser:
    """The authenticated user. `id` is the owner key for tasks."""

    id: str
    email: str | None = None
    aud: str | None = None
    role: str | None = None
    email_confirmed_at: str | None = None
    phone: str | None = None
    last_sign_in_at: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "AppUser":
        """Create AppUser from a GoTrue user object."""
        return cls(
            id=data["id"],
            email=data.get("email") or None,
            aud=data.get("aud"),
            role=data.get("role"),
            email_confirmed_at=data.get("email_confirmed_at"),
            phone=data.get("phone") or None,
            last_sign_in_at=data.get("last_sign_in_at"),
        )
