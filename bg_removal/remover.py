"""Background removal logic using rembg."""

from __future__ import annotations

import base64
import binascii
from io import BytesIO
from urllib.parse import urlparse

import requests
from PIL import Image
from rembg import new_session, remove

DATA_URI_PREFIX = "data:image/png;base64,"

# Global session to cache the model (loaded once, reused for all requests)
_BG_REMOVAL_SESSION = None


def _get_session():
    """Get or create the rembg session (singleton pattern)."""
    global _BG_REMOVAL_SESSION
    if _BG_REMOVAL_SESSION is None:
        _BG_REMOVAL_SESSION = new_session()
    return _BG_REMOVAL_SESSION


def _load_image(source: str) -> Image.Image:
    """
    Load an image from an http(s) URL or a base64 data URI.
    """
    if source.startswith("data:"):
        _, _, encoded = source.partition(",")
        try:
            raw = base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise ValueError("Image data URI is not valid base64") from exc
        return Image.open(BytesIO(raw)).convert("RGB")

    parsed = urlparse(source)
    if parsed.scheme in ("http", "https"):
        response = requests.get(source, timeout=30)
        response.raise_for_status()
        return Image.open(BytesIO(response.content)).convert("RGB")

    raise ValueError("Image must be an http(s) URL or a data URI")


def remove_background(image_source: str) -> str:
    """
    Remove the background from an image.

    Args:
        image_source: http(s) URL or data URI of the image.

    Returns:
        The cut-out as a base64-encoded PNG (RGBA).
    """
    input_image = _load_image(image_source)

    # Use cached session for better performance
    session = _get_session()
    output_image = remove(input_image, session=session)

    buffer = BytesIO()
    output_image.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def remove_background_to_data_uri(image_source: str) -> str:
    """Same as `remove_background`, wrapped as a PNG data URI usable as a locator."""
    return DATA_URI_PREFIX + remove_background(image_source)
