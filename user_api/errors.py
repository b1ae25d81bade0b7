"""
Named error kinds for the User API.

Every failure the service can report to a caller is one of the classes
below.  Each carries a fixed, human-readable message which is what ends up
in the ``{"error": ...}`` response body.
"""


class UserApiError(Exception):
    """Base class for all errors that are reported back to the caller."""

    message = "User API error"

    def __init__(self, message=None):
        super().__init__(message or self.message)

    def __str__(self):
        return self.args[0]


class FetchFailure(UserApiError):
    message = "Failed to fetch record"


class DecodeFailure(UserApiError):
    message = "Failed to unmarshal record"


class InvalidUserData(UserApiError):
    message = "Invalid user data"


class InvalidEmail(UserApiError):
    message = "Invalid email"


class EncodeFailure(UserApiError):
    message = "Could not marshal record"


class DeleteFailure(UserApiError):
    message = "Could not delete record"


class WriteFailure(UserApiError):
    message = "Could not dynamo put item"


class UserAlreadyExists(UserApiError):
    message = "User already exists"


class UserDoesNotExist(UserApiError):
    message = "User does not exist"


class ConfigurationError(RuntimeError):
    """Raised at cold start when required settings are missing or invalid."""
