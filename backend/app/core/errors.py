class BuildsyError(Exception):
    """Base error carrying the HTTP status it should be reported with."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: list[str] | None = None,
        error: str | None = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        self.error = error
        super().__init__(self.message)


class ValidationFailed(BuildsyError):
    status_code = 400
    default_message = "Validation error"


class AuthenticationRequired(BuildsyError):
    status_code = 401
    default_message = "Access token required"


class InvalidToken(BuildsyError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFound(BuildsyError):
    status_code = 404
    default_message = "Not found"


class ChatGenerationError(BuildsyError):
    default_message = "Failed to generate AI response"
