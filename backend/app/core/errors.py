from typing import Any, Optional

from firebase_admin import auth, exceptions as firebase_exceptions


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details

    @classmethod
    def from_response(cls, response, message: Optional[str] = None) -> "ApiError":
        """Build an error from a failed `requests.Response`."""
        return cls(
            response.status_code,
            message or response.reason or "An error occurred",
            details=response.text,
        )


class ValidationError(Exception):
    def __init__(self, message: str, field: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details


class AuthorizationError(Exception):
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)
        self.message = message


class AuthenticationError(Exception):
    def __init__(self, message: str = "You must be logged in to perform this action"):
        super().__init__(message)
        self.message = message


_STATUS_MESSAGES = {
    401: "You are not authenticated. Please log in.",
    403: "You do not have permission to perform this action.",
    404: "The requested resource was not found.",
    500: "An internal server error occurred. Please try again later.",
}


def handle_api_error(error: Any) -> str:
    """Turn any error into a message that is safe to show to the user."""
    if isinstance(error, ApiError):
        if error.status_code in _STATUS_MESSAGES:
            return _STATUS_MESSAGES[error.status_code]
        if error.status_code == 422:
            return error.message or "Invalid data provided."
        return error.message or "An unexpected error occurred."

    if isinstance(error, ValidationError):
        return f"{error.field}: {error.message}" if error.field else error.message

    if isinstance(error, (AuthorizationError, AuthenticationError)):
        return error.message

    if isinstance(error, Exception):
        return str(error) or "An unexpected error occurred. Please try again."

    return "An unexpected error occurred. Please try again."


def is_token_error(error: Exception) -> bool:
    """True for identity-provider errors caused by a bad ID token or session cookie."""
    return isinstance(
        error,
        (
            auth.InvalidIdTokenError,
            auth.ExpiredIdTokenError,
            auth.RevokedIdTokenError,
            auth.InvalidSessionCookieError,
            auth.ExpiredSessionCookieError,
            auth.RevokedSessionCookieError,
            auth.UserDisabledError,
        ),
    )


def handle_firebase_error(error: Exception) -> str:
    if isinstance(error, auth.UserNotFoundError):
        return "Invalid email or password."
    if isinstance(error, auth.EmailAlreadyExistsError):
        return "An account with this email already exists."
    if is_token_error(error):
        return "Invalid or expired token"
    if isinstance(error, auth.TooManyAttemptsTryLaterError):
        return "Too many failed attempts. Please try again later."
    if isinstance(error, firebase_exceptions.UnavailableError):
        return "Network error. Please check your connection."
    if isinstance(error, ValueError):
        # The admin SDK validates emails and passwords locally
        text = str(error).lower()
        if "password" in text:
            return "Password should be at least 6 characters."
        if "email" in text:
            return "Invalid email address."
    return str(error) or "An authentication error occurred."
