"""Error types raised while preparing and dispatching generation requests.

Every error carries the message shown to the caller and the HTTP status used
by the API layer. Messages never embed upstream exception objects; only the
first line of an upstream message, truncated, is ever retained.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

MAX_ERROR_MESSAGE_LENGTH = 200

# (substrings matched case-insensitively, user-facing message)
KNOWN_UPSTREAM_FAILURES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("no face", "face not detected", "cannot find any face", "face detection failed"),
        "No face was detected in the reference image. "
        "Please upload a clear, front-facing photo of the character.",
    ),
    (
        ("image is required", "missing required image", "no image provided"),
        "This model needs a reference image. Please upload one and try again.",
    ),
)


class GenerationError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(GenerationError):
    """A required setting (usually the API credential) is missing."""

    status_code = 500


class InvalidRequestError(GenerationError):
    status_code = 400


class UnknownModelError(InvalidRequestError):
    def __init__(self, model_id: str):
        super().__init__("Invalid model selected")
        self.model_id = model_id


class ReferenceImageRequiredError(InvalidRequestError):
    def __init__(self, model_name: str):
        super().__init__(
            f"{model_name} requires a reference image. Please upload an image to use this model."
        )
        self.model_name = model_name


class UnsupportedGenerationTypeError(InvalidRequestError):
    def __init__(self, model_name: str, generation_type: str):
        super().__init__(f"{model_name} does not support {generation_type} generation.")


class UpstreamValidationError(InvalidRequestError):
    """A known upstream failure pattern, translated into an actionable message."""


class MusicModelNotFoundError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            "The selected music model was not found on Replicate. Set REPLICATE_MUSIC_MODEL_ID "
            "to a valid music model (e.g., meta/musicgen or your own)."
        )


class GenerationFailedError(GenerationError):
    """Every upstream call failed, or none produced an output."""

    status_code = 500

    def __init__(self, message: str, failures: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.failures = list(failures or [])


def summarize_error(exc: BaseException, limit: int = MAX_ERROR_MESSAGE_LENGTH) -> str:
    """Return the first line of an exception's message, truncated to `limit`.

    Only the message text is used; reprs, arguments and attached request
    objects (which may hold auth headers) are ignored.
    """
    text = str(exc).strip()
    if not text:
        return type(exc).__name__
    first_line = text.splitlines()[0]
    if len(first_line) > limit:
        return first_line[:limit].rstrip() + "..."
    return first_line


def translate_failure(message: str) -> Optional[str]:
    """Map a known upstream failure message to a user-facing one, else None."""
    lowered = message.lower()
    for needles, friendly in KNOWN_UPSTREAM_FAILURES:
        if any(needle in lowered for needle in needles):
            return friendly
    return None
