"""Request/Response models for the generation service."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the snake_case field names."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


class GenerationRequest(_CamelModel):
    """Request model for image generation."""

    model_id: str = Field(..., alias="modelId", min_length=1, description="Catalog id of the model")
    prompt: str = Field(..., min_length=1, description="Text prompt for image generation")
    negative_prompt: Optional[str] = Field(
        default=None, alias="negativePrompt", description="Things the image should avoid"
    )
    reference_image: Optional[str] = Field(
        default=None,
        alias="referenceImage",
        description="Reference image as a URL or data URI. Ignored by models without image support.",
    )
    width: int = Field(default=1024, gt=0, description="Output image width")
    height: int = Field(default=1024, gt=0, description="Output image height")
    num_outputs: int = Field(default=1, alias="numOutputs", ge=1, le=10, description="Number of images")
    remove_background: bool = Field(
        default=False, alias="removeBackground", description="Cut out the subject of each result"
    )
    generation_type: Literal["character", "background"] = Field(
        default="character", alias="generationType", description="What kind of asset is requested"
    )


class GenerationResponse(BaseModel):
    """Response model for image generation."""

    images: List[str] = Field(..., description="Locators of the generated images")
    model: str = Field(..., description="Display name of the model used")


class MusicRequest(_CamelModel):
    """Request model for music generation."""

    prompt: str = Field(..., description="Description of the track")
    duration: Optional[float] = Field(default=None, description="Track length in seconds (clamped to 5-30)")
    model_id: Optional[str] = Field(default=None, alias="modelId", description="Catalog id of the music model")


class GeneratedTrack(_CamelModel):
    url: str
    model_name: str = Field(..., alias="modelName")
    duration: int


class MusicResponse(BaseModel):
    """Response model for music generation."""

    tracks: List[GeneratedTrack]


class ModelInfo(_CamelModel):
    id: str
    name: str
    description: str
    style: Optional[str] = None
    speed: Optional[str] = None
    supports_image: bool = Field(default=False, alias="supportsImage")
    supports_background: bool = Field(default=False, alias="supportsBackground")
    requires_image: bool = Field(default=False, alias="requiresImage")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable failure reason")
