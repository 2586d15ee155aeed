"""Request/Response models for the background removal endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BackgroundRemovalRequest(BaseModel):
    """Request model for background removal."""

    image: str = Field(..., min_length=1, description="Image URL or data URI")


class BackgroundRemovalResponse(BaseModel):
    """Response model for background removal."""

    success: bool = Field(..., description="Whether background removal succeeded")
    image_base64: str | None = Field(default=None, description="Cut-out image as base64 PNG")
    error_message: str | None = Field(default=None, description="Error message if removal failed")
