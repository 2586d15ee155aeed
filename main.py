"""FastAPI application for the generation service (image, music and background removal)."""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import config
from bg_removal.models import BackgroundRemovalRequest, BackgroundRemovalResponse
from bg_removal.remover import remove_background
from generation import registry
from generation.errors import GenerationError, summarize_error
from generation.shaping import rule_for
from infer import run_generation, run_music
from models import (
    ErrorResponse,
    GenerationRequest,
    GenerationResponse,
    ModelInfo,
    MusicRequest,
    MusicResponse,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Replicate Generation Service", version="0.1.0")

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    missing = [str(err["loc"][-1]) for err in exc.errors() if err.get("type") == "missing"]
    if request.url.path == "/generate" and {"prompt", "modelId"} & set(missing):
        message = "Prompt and model are required"
    elif missing:
        message = f"Missing required field(s): {', '.join(missing)}"
    else:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
        message = f"Invalid value for {field}: {first.get('msg', 'invalid request')}"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Only the message is logged; the exception may carry request headers.
    logger.error("Unhandled error on %s: %s", request.url.path, summarize_error(exc))
    return JSONResponse(
        status_code=500, content={"error": "Something went wrong. Please try again."}
    )


@app.post("/generate", response_model=GenerationResponse, responses=_ERROR_RESPONSES)
def generate(request: GenerationRequest) -> GenerationResponse:
    """
    Generate images with the selected model.

    Sub-batches that fail upstream are skipped; the call only fails when no
    image at all was produced.
    """
    return run_generation(request)


@app.post("/music", response_model=MusicResponse, responses=_ERROR_RESPONSES)
def music(request: MusicRequest) -> MusicResponse:
    """Generate an instrumental background track."""
    return run_music(request)


@app.post("/remove_background", response_model=BackgroundRemovalResponse)
def remove_bg(request: BackgroundRemovalRequest) -> BackgroundRemovalResponse:
    """
    Remove background from an image.

    This is an optional standalone endpoint. Generation requests can also ask
    for it with `removeBackground`.
    """
    try:
        image_base64 = remove_background(request.image)
        return BackgroundRemovalResponse(success=True, image_base64=image_base64, error_message=None)
    except Exception as exc:  # noqa: BLE001
        return BackgroundRemovalResponse(
            success=False, image_base64=None, error_message=summarize_error(exc)
        )


@app.get("/models", response_model=List[ModelInfo])
def list_models() -> List[ModelInfo]:
    """List the image models with their capabilities."""
    return [
        ModelInfo(
            id=model.id,
            name=model.name,
            description=model.description,
            style=model.style,
            speed=model.speed.value,
            supports_image=model.supports_image,
            supports_background=model.supports_background,
            requires_image=rule_for(model).requires_image,
        )
        for model in registry.list_models()
    ]


@app.get("/music/models", response_model=List[ModelInfo])
def list_music_models() -> List[ModelInfo]:
    return [
        ModelInfo(id=model.id, name=model.name, description=model.description)
        for model in registry.list_music_models()
    ]


@app.get("/health")
async def health() -> dict:
    """Health check endpoint for the generation service."""
    return {
        "status": "ok",
        "service": "generation",
        "services": ["generation", "music", "background_removal"],
        "replicate_configured": config.get_replicate_api_key() is not None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
