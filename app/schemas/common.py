from typing import Any, Literal

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope shared by every error handler."""

    error: str
    details: list[dict[str, Any]] | None = None


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    database: Literal["up", "down"]
    environment: str
    timestamp: str
