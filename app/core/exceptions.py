"""Error taxonomy shared by services and the HTTP layer.

Each ``AppError`` carries the status code it surfaces as and a message that is
safe to show to clients. Services raise these; ``app.main`` turns them into
JSON responses.
"""


class ConfigError(RuntimeError):
    """The process is misconfigured and must not start."""


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid credentials"


class InvalidToken(Unauthorized):
    """Bad signature, malformed payload or expired token; callers see plain 401."""


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden: Insufficient permissions"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"
