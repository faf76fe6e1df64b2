"""Error types shared by the Jira services and the API layer."""


class ApiError(Exception):
    """Base error carrying an HTTP status and an optional upstream body."""

    status_code = 500

    def __init__(self, message, details=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(ApiError):
    """Request body is missing required fields."""

    status_code = 400


class AuthFailure(ApiError):
    """Jira rejected the credentials, or there is no usable session."""

    status_code = 401


class UpstreamError(ApiError):
    """A required Jira call answered with a non-2xx status."""
