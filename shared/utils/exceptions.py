"""Custom exception hierarchy for better error handling."""
from fastapi import HTTPException, status


class EssayWriterException(Exception):
    """Base exception for all application errors."""
    pass


class SessionNotFoundException(EssayWriterException):
    """Raised when an essay session is not found."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Essay session {self.session_id} not found"
        )


class InvalidSessionConfigError(EssayWriterException):
    """Raised when session limits are out of range."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid session config '{field}'={value!r}: {reason}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(self), "field": self.field}
        )


class DatabaseException(EssayWriterException):
    """Raised when database operations fail."""

    def __init__(self, operation: str, original_error: Exception):
        self.operation = operation
        self.original_error = original_error
        super().__init__(f"Database {operation} failed: {str(original_error)}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database operation failed"
        )


class StaleStateError(EssayWriterException):
    """Raised when an optimistic locking conflict is detected during session update."""

    def __init__(self, message: str):
        super().__init__(message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(self)
        )


class PromptTemplateError(EssayWriterException):
    """Raised when prompt template rendering fails."""

    def __init__(self, template_name: str, missing_vars: list[str]):
        self.template_name = template_name
        self.missing_vars = missing_vars
        super().__init__(f"Prompt template '{template_name}' missing variables: {', '.join(missing_vars)}")
