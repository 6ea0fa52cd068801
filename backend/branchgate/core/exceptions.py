"""Custom exceptions for application-specific error handling."""

from __future__ import annotations

from typing import Any, Dict, Optional


class BranchGateException(Exception):
    """Base exception for all application errors."""

    # Name rendered to clients; subclasses that must not be told apart externally share one.
    public_name: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.public_name or self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class NotFoundError(BranchGateException):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "not_found", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NOT_FOUND", details=details, status_code=404)


class ConflictError(BranchGateException):
    """Raised when a request conflicts with current state."""

    def __init__(self, message: str = "conflict", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFLICT", details=details, status_code=409)


class InvalidInputError(BranchGateException):
    """Raised when caller-supplied fields are missing or malformed."""

    def __init__(self, message: str = "invalid_input", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="BAD_REQUEST", details=details, status_code=400)


class UserAlreadyExistsError(ConflictError):
    """Raised when a username is already taken."""

    def __init__(self, username: str):
        super().__init__("username_exists", details={"username": username})


class InternalError(BranchGateException):
    """Raised when storage, entropy or signing fails; never retried."""

    def __init__(self, message: str = "internal_error"):
        super().__init__(message, error_code="INTERNAL_ERROR", status_code=500)


# ===== AUTHENTICATION/AUTHORIZATION EXCEPTIONS =====


class AuthenticationException(BranchGateException):
    """Base exception for authentication errors."""


class NotAuthenticatedError(AuthenticationException):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self, message: str = "not_authenticated"):
        super().__init__(
            message,
            error_code="NOT_AUTHENTICATED",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentialsError(AuthenticationException):
    """Raised when a username/password pair does not authenticate."""

    public_name = "InvalidCredentialsError"

    def __init__(self, message: str = "invalid_credentials"):
        super().__init__(message, error_code="INVALID_CREDENTIALS", status_code=401)


class InactiveUserError(InvalidCredentialsError):
    """Raised when the credentials are right but the account is disabled."""


class InvalidTokenError(AuthenticationException):
    """Raised when an access token fails any verification step."""

    public_name = "InvalidTokenError"

    def __init__(self, message: str = "invalid_token"):
        super().__init__(
            message,
            error_code="INVALID_TOKEN",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidRefreshTokenError(InvalidTokenError):
    """Raised when a refresh token is unknown, expired, revoked or orphaned."""


class InsufficientPermissionsError(AuthenticationException):
    """Raised when user lacks required permissions."""

    def __init__(self, message: str = "forbidden"):
        super().__init__(message, error_code="INSUFFICIENT_PERMISSIONS", status_code=403)
