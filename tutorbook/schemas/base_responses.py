"""
Base response schemas for standardized API responses.

Every endpoint answers with the same envelope so clients can branch on
``success`` before looking at anything else:

    {"success": true, "data": {...}}
    {"success": false, "message": "...", "code": "..."}
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope."""

    success: bool = Field(default=True, description="Operation success status")
    data: T = Field(description="Endpoint payload")


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = Field(default=False, description="Always false for errors")
    message: str = Field(description="Human-readable error message")
    code: str = Field(description="Error code for programmatic handling")
    details: Optional[Any] = Field(
        default=None, description="Structured context, when available"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Cannot accept a booking that is confirmed",
                "code": "INVALID_TRANSITION",
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str = Field(description="ok or degraded")
    database: str = Field(description="Database connectivity status")
    version: str
