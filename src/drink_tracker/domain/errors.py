"""Error types raised by the drink tracker."""


class DrinkTrackerError(Exception):
    """Base error for the application."""


class DataAccessError(DrinkTrackerError):
    """A record store or storage call failed."""


class DrinkNotFoundError(DataAccessError):
    """The requested drink does not exist for the user."""


class AuthenticationError(DrinkTrackerError):
    """No valid user is present."""

    def __init__(self, message: str = "User must be authenticated") -> None:
        super().__init__(message)


class ImageReadError(DrinkTrackerError):
    """An uploaded image could not be read."""


class AuthProviderError(DrinkTrackerError):
    """The identity provider rejected a sign-in or sign-up."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
