"""Session provider interface."""

from typing import Protocol

from focusflow.core.user import AppUser


class SessionProvider(Protocol):
    """Interface for signing users in and handing out access tokens."""

    def sign_in_with_id_token(
        self, id_token: str, nonce: str | None = None, provider: str = "apple"
    ) -> AppUser:
        """Exchange an identity provider token for a session."""
        ...

    def current_user(self) -> AppUser | None:
        """The signed-in user, or None."""
        ...

    def access_token(self) -> str:
        """A valid access token for the current session."""
        ...

    def sign_out(self) -> None:
        """End the current session."""
        ...
