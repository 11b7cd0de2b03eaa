"""Supabase auth adapter - session handling against GoTrue."""

import logging
import threading
import time
from pathlib import Path

import requests

from focusflow.config import Config, Session, load_config
from focusflow.core.user import AppUser

logger = logging.getLogger(__name__)

# Refresh when the token expires within this many seconds
REFRESH_MARGIN = 300


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    pass


class SupabaseAuthAdapter:
    """
    Supabase auth adapter.

    Implements SessionProvider protocol. Exchanges identity tokens for a
    session, keeps it refreshed and persisted. No business logic - just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        session: Session | None = None,
        session_path: Path | None = None,
    ):
        self.config = config or load_config()
        self.session_path = session_path
        self.session = session or Session.load(session_path)
        self._http = requests.Session()
        # Task list fetches call access_token() from worker threads
        self._refresh_lock = threading.Lock()

    @property
    def _auth_base(self) -> str:
        if not self.config.supabase_url:
            raise AuthenticationError(
                "Missing Supabase settings. Add SUPABASE_URL to config/focusflow.conf"
            )
        return f"{self.config.supabase_url}/auth/v1"

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.config.supabase_anon_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    def _token_request(self, grant_type: str, payload: dict) -> dict:
        """POST to the token endpoint and return the session payload."""
        try:
            resp = self._http.post(
                f"{self._auth_base}/token",
                params={"grant_type": grant_type},
                json=payload,
                headers=self._headers(),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Could not reach auth server: {e}") from e

        if resp.status_code != 200:
            raise AuthenticationError(f"Token request ({grant_type}) failed: {resp.text}")

        try:
            return resp.json()
        except ValueError as e:
            raise AuthenticationError(f"Unexpected token response: {e}") from e

    def _store_session(self, data: dict) -> AppUser:
        """Persist the session payload returned by the token endpoint."""
        try:
            user = AppUser.from_api(data["user"])
            self.session.access_token = data["access_token"]
        except (KeyError, TypeError) as e:
            raise AuthenticationError(f"Unexpected token response: {e}") from e

        if "refresh_token" in data:
            self.session.refresh_token = data["refresh_token"]
        self.session.expires_at = int(time.time()) + (data.get("expires_in") or 3600)
        self.session.user_id = user.id
        self.session.email = user.email or ""
        self.session.save(self.session_path)
        return user

    def sign_in_with_id_token(
        self, id_token: str, nonce: str | None = None, provider: str = "apple"
    ) -> AppUser:
        """Exchange an identity provider token (Sign in with Apple) for a session."""
        if not id_token:
            raise AuthenticationError("No identity token provided")

        payload = {"provider": provider, "id_token": id_token}
        if nonce:
            payload["nonce"] = nonce

        user = self._store_session(self._token_request("id_token", payload))
        logger.info(f"Signed in as {user.id}")
        return user

    def current_user(self) -> AppUser | None:
        """The signed-in user from the stored session, or None."""
        if not self.session.access_token or not self.session.user_id:
            return None
        return AppUser(id=self.session.user_id, email=self.session.email or None)

    def access_token(self) -> str:
        """Return a valid access token, refreshing it if expired or expiring soon."""
        if not self.session.access_token:
            raise AuthenticationError("Not signed in. Run 'focusflow signin' first.")

        with self._refresh_lock:
            if self._expiring():
                self._refresh_session()
            return self.session.access_token

    def _expiring(self) -> bool:
        expires_at = self.session.expires_at
        return bool(expires_at) and time.time() >= expires_at - REFRESH_MARGIN

    def _refresh_session(self) -> None:
        """Refresh the access token."""
        if not self.session.refresh_token:
            raise AuthenticationError("No refresh token. Run 'focusflow signin' first.")

        logger.debug("Refreshing access token")
        self._store_session(
            self._token_request("refresh_token", {"refresh_token": self.session.refresh_token})
        )

    def sign_out(self) -> None:
        """Revoke the session server-side where possible and forget it locally."""
        token = self.session.access_token
        try:
            if token and self.config.supabase_url:
                resp = self._http.post(
                    f"{self._auth_base}/logout",
                    headers=self._headers(token),
                    timeout=self.config.request_timeout,
                )
                if resp.status_code >= 400:
                    logger.warning(f"Server-side logout failed ({resp.status_code}): {resp.text}")
        except requests.RequestException as e:
            logger.warning(f"Server-side logout failed: {e}")
        finally:
            self.session.clear(self.session_path)
        logger.info("Signed out")

    def delete_user(self, user_id: str) -> None:
        """Delete a user through the admin API, then sign out."""
        if not self.config.supabase_service_role_key:
            raise AuthenticationError(
                "Missing SUPABASE_SERVICE_ROLE_KEY in config/focusflow.conf"
            )

        try:
            resp = self._http.delete(
                f"{self._auth_base}/admin/users/{user_id}",
                headers={
                    "Authorization": f"Bearer {self.config.supabase_service_role_key}",
                    "apikey": self.config.supabase_anon_key,
                },
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Could not reach auth server: {e}") from e

        if resp.status_code != 200:
            raise AuthenticationError(f"Deleting user failed ({resp.status_code}): {resp.text}")

        logger.info(f"Deleted user {user_id}")
        self.sign_out()
