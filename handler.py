"""Runpod serverless handler for the generation service.

This module wraps the generation, music and background-removal logic into a
Runpod-compatible handler function.

Input format (queue job JSON):

Generate task (default task_type is "generate"):
{
  "input": {
    "task_type": "generate",             # optional, defaults to "generate"
    "modelId": "flux-dev",
    "prompt": "....",
    "negativePrompt": "...",             # optional
    "referenceImage": "https://...",     # optional, URL or data URI
    "width": 1024,                       # optional
    "height": 1024,                      # optional
    "numOutputs": 4,                     # optional, 1-10
    "removeBackground": false            # optional
  }
}

Music task:
{
  "input": {
    "task_type": "music",
    "prompt": "....",
    "duration": 15,                      # optional, clamped to 5-30
    "modelId": "musicgen"                # optional
  }
}

Background-removal-only task:
{
  "input": {
    "task_type": "remove_background",
    "image": "https://..."
  }
}

Every task returns "success" and "error_message" next to its payload:
{"success": true, "images": [...], "model": "Flux Dev", "error_message": null}
{"success": true, "tracks": [...], "error_message": null}
{"success": true, "image_base64": "<PNG as base64>", "error_message": null}
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import runpod
from pydantic import ValidationError

from bg_removal.remover import remove_background
from generation.errors import GenerationError, summarize_error
from infer import run_generation, run_music
from models import GenerationRequest, MusicRequest

logger = logging.getLogger(__name__)


def _failure(message: str, **empty: Any) -> Dict[str, Any]:
    return {"success": False, **empty, "error_message": message}


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "input"
    return f"Invalid '{field}': {first['msg']}"


def _handle_generate(job_input: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    """Handle the 'generate' task_type."""
    empty = {"images": [], "model": None}
    model_id = job_input.get("modelId") or job_input.get("model_id")
    if not job_input.get("prompt") or not model_id:
        return _failure("Both 'prompt' and 'modelId' are required for generate task.", **empty)

    try:
        request = GenerationRequest.model_validate(job_input)
        result = run_generation(request)
    except ValidationError as exc:
        return _failure(_validation_message(exc), **empty)
    except GenerationError as exc:
        return _failure(exc.message, **empty)
    except Exception as exc:  # noqa: BLE001
        logger.error("Job %s generate failed: %s", job_id, summarize_error(exc))
        return _failure("Failed to generate images. Please try again.", **empty)

    return {"success": True, "images": result.images, "model": result.model, "error_message": None}


def _handle_music(job_input: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    """Handle the 'music' task_type."""
    empty = {"tracks": []}
    if not job_input.get("prompt"):
        return _failure("'prompt' is required for music task.", **empty)

    try:
        request = MusicRequest.model_validate(job_input)
        result = run_music(request)
    except ValidationError as exc:
        return _failure(_validation_message(exc), **empty)
    except GenerationError as exc:
        return _failure(exc.message, **empty)
    except Exception as exc:  # noqa: BLE001
        logger.error("Job %s music failed: %s", job_id, summarize_error(exc))
        return _failure("Failed to generate music. Please try again.", **empty)

    return {
        "success": True,
        "tracks": [track.model_dump(by_alias=True) for track in result.tracks],
        "error_message": None,
    }


def _handle_remove_background(job_input: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    """Handle the 'remove_background' task_type."""
    image = job_input.get("image")
    if not image:
        return _failure("'image' is required for remove_background task.", image_base64=None)

    try:
        image_base64 = remove_background(image)
    except Exception as exc:  # noqa: BLE001
        logger.error("Job %s background removal failed: %s", job_id, summarize_error(exc))
        return _failure(summarize_error(exc), image_base64=None)

    return {"success": True, "image_base64": image_base64, "error_message": None}


def handler(event: Dict[str, Any], context: Any | None = None) -> Dict[str, Any]:
    """Runpod serverless handler.

    Parameters
    ----------
    event:
        The RunPod job/event payload, typically:
        {
            "id": "...",
            "input": { ... }
        }
    context:
        Optional execution context for compatibility with handler(event, context)
        style signatures. Not used by this implementation.
    """
    job_id = str(event.get("id", "unknown"))
    job_input = event.get("input") or {}

    task_type = job_input.get("task_type", "generate")

    if task_type == "generate":
        return _handle_generate(job_input, job_id)
    if task_type == "music":
        return _handle_music(job_input, job_id)
    if task_type == "remove_background":
        return _handle_remove_background(job_input, job_id)

    return _failure(f"Unknown task_type: {task_type}")


if __name__ == "__main__":
    runpod.serverless.start({"handler": handler})
