"""
Application error kinds.

Every error carries an HTTP status and a stable machine-readable ``code`` so
clients can branch on the kind of failure instead of on message text.
"""
from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class InvalidInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    message = "Invalid input"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    message = "Could not validate credentials"


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "email_exists"
    message = "Email already registered"


class InvalidMediaError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_media"
    message = "Invalid file type. Only images and videos are allowed."


class UploadFailedError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "upload_failed"
    message = "Media upload failed"


class InternalError(AppError):
    pass


def validation_message(errors: list) -> str:
    """Human-readable message for the first pydantic validation error"""
    if not errors:
        return InvalidInputError.message
    error = errors[0]
    message = error.get("msg", InvalidInputError.message)
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    field = next(
        (str(part) for part in reversed(error.get("loc", ())) if isinstance(part, str) and part != "body"),
        None,
    )
    return f"{field}: {message}" if field else message
