"""Custom exceptions for authentication and authorization."""


class AuthenticationError(Exception):
    """Base exception for identity-provider failures."""

    pass


class TransientFailure(AuthenticationError):
    """Raised when the identity provider or data store could not be reached.

    Distinct from a definite denial: the same request may succeed on retry.
    """

    pass


class CredentialsRejectedError(AuthenticationError):
    """Raised when the identity provider rejects an email/password pair."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RegistrationError(AuthenticationError):
    """Raised when sign-up or retailer account creation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
