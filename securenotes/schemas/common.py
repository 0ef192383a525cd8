"""Common response schemas."""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Tagged result of a note operation.

    ``success`` is the only discriminant callers need; a failure always
    carries an ``error`` with a message.
    """

    success: bool = True
    data: T | None = None
    error: "ErrorDetail | None" = None

    @classmethod
    def failure(cls, code: str, message: str, details: dict[str, Any] | None = None) -> "ApiResponse":
        return cls(success=False, error=ErrorDetail(code=code, message=message, details=details))


class ErrorDetail(BaseModel):
    """Error detail."""

    code: str
    message: str
    details: dict[str, Any] | None = None


# Update forward reference
ApiResponse.model_rebuild()
