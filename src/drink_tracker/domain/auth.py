"""Domain models for authentication forms."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthenticatedUser:
    """The user behind a validated access token."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class FormResult:
    """Outcome of a login or signup form submission."""

    success: bool
    email: str | None = None
    error: str | None = None
    message: str | None = None
    access_token: str | None = None
    requires_confirmation: bool = False
    status_code: int = 200

    @classmethod
    def failure(
        cls, error: str, email: str | None, status_code: int = 400
    ) -> "FormResult":
        """Build a failed result echoing the submitted email."""
        return cls(success=False, email=email, error=error, status_code=status_code)
