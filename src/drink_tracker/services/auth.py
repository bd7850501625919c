"""Authentication service for login, signup and token checks."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from drink_tracker.domain.auth import AuthenticatedUser, FormResult
from drink_tracker.domain.errors import AuthenticationError, AuthProviderError

_logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthSession:
    """Identity provider response for a sign-in or sign-up."""

    user: AuthenticatedUser | None
    access_token: str | None


class AuthClient(Protocol):
    """Interface for the identity provider."""

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """Return the user for a valid access token."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""

    def sign_up(self, email: str, password: str, redirect_to: str) -> AuthSession:
        """Register a new account."""


@dataclass
class AuthService:
    """Application service for authentication forms."""

    client: AuthClient

    def get_current_user(self, access_token: str | None) -> AuthenticatedUser:
        """Return the token's user or raise AuthenticationError."""
        if not access_token:
            raise AuthenticationError
        try:
            user = self.client.get_user(access_token)
        except AuthProviderError as exc:
            raise AuthenticationError from exc
        if user is None:
            raise AuthenticationError
        return user

    def login(self, email: str | None, password: str | None) -> FormResult:
        """Validate the login form and sign the user in."""
        if not email or not password:
            return FormResult.failure("Email and password are required", email)
        if not EMAIL_PATTERN.match(email):
            return FormResult.failure("Please enter a valid email address", email)

        try:
            session = self.client.sign_in(email, password)
        except AuthProviderError as exc:
            _logger.warning("Login error: %s", exc.message)
            return FormResult.failure(_login_error_message(exc), email)

        if session.access_token:
            _logger.info(
                "User logged in",
                extra={"user_id": str(session.user.id) if session.user else None},
            )
            return FormResult(
                success=True, email=email, access_token=session.access_token
            )
        return FormResult.failure(
            "An unexpected error occurred. Please try again.", email, status_code=500
        )

    def signup(
        self,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
        redirect_to: str,
    ) -> FormResult:
        """Validate the signup form and register the account."""
        if not email or not password or not confirm_password:
            return FormResult.failure("All fields are required", email)
        if not EMAIL_PATTERN.match(email):
            return FormResult.failure("Please enter a valid email address", email)
        if len(password) < MIN_PASSWORD_LENGTH:
            return FormResult.failure(
                "Password must be at least 6 characters long", email
            )
        if password != confirm_password:
            return FormResult.failure("Passwords do not match", email)

        try:
            session = self.client.sign_up(email, password, redirect_to)
        except AuthProviderError as exc:
            _logger.warning("Signup error: %s", exc.message)
            return FormResult.failure(_signup_error_message(exc), email)

        if session.user is None:
            return FormResult.failure(
                "An unexpected error occurred. Please try again.",
                email,
                status_code=500,
            )
        _logger.info("User created", extra={"user_id": str(session.user.id)})
        if session.access_token is None:
            return FormResult(
                success=True,
                email=email,
                message=(
                    "Account created! Please check your email for a confirmation link."
                ),
                requires_confirmation=True,
            )
        return FormResult(
            success=True,
            email=email,
            message="Account created successfully! You are now signed in.",
            access_token=session.access_token,
        )


def _login_error_message(exc: AuthProviderError) -> str:
    if "Invalid login credentials" in exc.message:
        return (
            "Invalid email or password. "
            "Please check your credentials and try again."
        )
    if "Email not confirmed" in exc.message or exc.code == "email_not_confirmed":
        return (
            "Please check your email and click the confirmation link before "
            "signing in. If you haven't received the email, please check your "
            "spam folder."
        )
    if "Too many requests" in exc.message:
        return "Too many login attempts. Please wait a moment before trying again."
    return exc.message or "An error occurred during sign in. Please try again."


def _signup_error_message(exc: AuthProviderError) -> str:
    if "User already registered" in exc.message:
        return "An account with this email already exists. Please sign in instead."
    if "Password should be at least" in exc.message:
        return "Password is too weak. Please choose a stronger password."
    return exc.message or "An error occurred during signup. Please try again."
