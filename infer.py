"""Generation logic - resolves models, shapes requests and calls Replicate."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import replicate

import config
from bg_removal.remover import remove_background_to_data_uri
from generation import registry
from generation.dispatcher import dispatch, normalize_output
from generation.errors import (
    ConfigurationError,
    GenerationFailedError,
    InvalidRequestError,
    MusicModelNotFoundError,
    UnsupportedGenerationTypeError,
    summarize_error,
)
from generation.shaping import shape
from models import GeneratedTrack, GenerationRequest, GenerationResponse, MusicRequest, MusicResponse

logger = logging.getLogger(__name__)

MUSIC_PROMPT_SUFFIX = ", instrumental background music, no vocals, seamless, loop-friendly"
MUSIC_MIN_SECONDS = 5
MUSIC_MAX_SECONDS = 30
MUSIC_DEFAULT_SECONDS = 15

_CLIENT = None


def _get_client(api_key: str) -> replicate.Client:
    """Get or create the Replicate client (lazy loading, singleton)."""
    global _CLIENT
    if _CLIENT is None:
        _CLIENT = replicate.Client(api_token=api_key)
    return _CLIENT


def _require_api_key() -> str:
    api_key = config.get_replicate_api_key()
    if not api_key:
        raise ConfigurationError("Replicate API token not configured")
    return api_key


def run_model(model_ref: str, payload: Dict[str, Any]) -> Any:
    """Run one prediction and return the raw Replicate output."""
    client = _get_client(_require_api_key())
    return client.run(model_ref, input=payload)


def _remove_backgrounds(locators: List[str]) -> List[str]:
    """Swap each locator for its cut-out; keep the original when removal fails."""
    processed: List[str] = []
    for locator in locators:
        try:
            processed.append(remove_background_to_data_uri(locator))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Background removal failed, keeping original: %s", summarize_error(exc))
            processed.append(locator)
    return processed


def run_generation(request: GenerationRequest) -> GenerationResponse:
    """
    Generate images for the given request.

    Args:
        request: Validated generation request.

    Returns:
        The generated image locators and the display name of the model.

    Raises:
        ConfigurationError: the Replicate token is missing.
        InvalidRequestError: the request cannot be served by the selected model.
        GenerationFailedError: no sub-batch produced an output.
    """
    _require_api_key()

    if not request.prompt.strip():
        raise InvalidRequestError("Prompt and model are required")

    descriptor = registry.resolve(request.model_id)
    if request.generation_type == "background" and not descriptor.supports_background:
        raise UnsupportedGenerationTypeError(descriptor.name, request.generation_type)

    shaped = shape(descriptor, request, prompt_prefix=config.PROMPT_PREFIX)
    logger.info(
        "Generating %d image(s) with %s (%s)",
        request.num_outputs,
        descriptor.id,
        descriptor.family.value,
    )

    images = dispatch(
        run_model,
        descriptor.replicate_id,
        shaped.payload,
        shaped.max_per_call,
        request.num_outputs,
    )

    if request.remove_background:
        images = _remove_backgrounds(images)

    return GenerationResponse(images=images, model=descriptor.name)


def _clamp_duration(duration: float | None) -> int:
    seconds = round(duration) if duration else MUSIC_DEFAULT_SECONDS
    return min(MUSIC_MAX_SECONDS, max(MUSIC_MIN_SECONDS, seconds))


def run_music(request: MusicRequest) -> MusicResponse:
    """Generate one instrumental track for the given request."""
    _require_api_key()

    prompt = request.prompt.strip()
    if not prompt:
        raise InvalidRequestError("Prompt is required")

    model = registry.resolve_music(request.model_id)
    if not model.replicate_id:
        raise ConfigurationError(
            "No music model configured. Set REPLICATE_MUSIC_MODEL_ID to a valid Replicate "
            "music model (e.g., meta/musicgen) in your environment."
        )

    seconds = _clamp_duration(request.duration)
    payload = {"prompt": f"{prompt}{MUSIC_PROMPT_SUFFIX}", "duration": seconds}

    try:
        urls = normalize_output(run_model(model.replicate_id, payload))
    except Exception as exc:  # noqa: BLE001
        message = summarize_error(exc)
        logger.error("Music generation with %s failed: %s", model.replicate_id, message)
        if "404" in message or "not found" in message.lower():
            raise MusicModelNotFoundError() from None
        raise GenerationFailedError(
            "Failed to generate music. Please try again.", failures=[message]
        ) from None

    if not urls:
        raise GenerationFailedError("Failed to generate music. Try another prompt or model.")

    return MusicResponse(
        tracks=[GeneratedTrack(url=url, model_name=model.name, duration=seconds) for url in urls]
    )
