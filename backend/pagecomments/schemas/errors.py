"""Error response schemas."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error body for rejected comment submissions."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "validation_error",
                    "message": "Please fill in all required fields",
                    "severity": "bad",
                    "details": {"Email": "Email is required"},
                },
                {
                    "error": "duplicate_comment",
                    "message": "That comment already exists! Spammer!",
                    "severity": "bad",
                },
            ]
        }
    )

    error: str = Field(
        ...,
        description="Error type identifier",
        examples=["validation_error", "duplicate_comment"],
    )
    message: str = Field(..., description="Human-readable error message")
    severity: str = Field("bad", description="Message styling tag")
    details: Optional[dict[str, str]] = Field(
        None,
        description="Per-field validation messages",
    )
