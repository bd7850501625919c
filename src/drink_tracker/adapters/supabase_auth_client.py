"""Supabase Auth adapter."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from drink_tracker.domain.auth import AuthenticatedUser
from drink_tracker.domain.errors import AuthProviderError
from drink_tracker.services.auth import AuthClient, AuthSession


@dataclass
class SupabaseAuthClient(AuthClient):
    """Identity provider backed by Supabase Auth."""

    client: Client

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """Validate an access token and return its user."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            raise AuthProviderError(exc.message, getattr(exc, "code", None)) from exc
        if response is None or response.user is None:
            return None
        return _to_user(response.user)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthProviderError(exc.message, getattr(exc, "code", None)) from exc
        return _to_session(response)

    def sign_up(self, email: str, password: str, redirect_to: str) -> AuthSession:
        """Register a new account."""
        try:
            response = self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"email_redirect_to": redirect_to},
                }
            )
        except AuthError as exc:
            raise AuthProviderError(exc.message, getattr(exc, "code", None)) from exc
        return _to_session(response)


def _to_user(user: object) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=UUID(str(user.id)),  # type: ignore[attr-defined]
        email=getattr(user, "email", None),
    )


def _to_session(response: object) -> AuthSession:
    user = getattr(response, "user", None)
    session = getattr(response, "session", None)
    return AuthSession(
        user=_to_user(user) if user is not None else None,
        access_token=session.access_token if session is not None else None,
    )
