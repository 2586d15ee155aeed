"""Environment-driven settings for the generation service.

Values are read from the process environment, with `.env.local` and `.env`
loaded first when present. The Replicate credential is looked up on every
call so a missing key fails the request instead of the import.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv(".env.local")
load_dotenv()

DEFAULT_MUSIC_MODEL_ID = "meta/musicgen"

# Style hint prepended to every image prompt.
PROMPT_PREFIX = os.getenv("PROMPT_PREFIX", "anime style, ")

PORT = int(os.getenv("PORT", "8001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def get_replicate_api_key() -> str | None:
    """Return the Replicate API token, or None when it is not configured."""
    key = os.getenv("REPLICATE_API_KEY")
    if key is None or not key.strip():
        return None
    return key.strip()


def get_music_model_id() -> str:
    return os.getenv("REPLICATE_MUSIC_MODEL_ID") or DEFAULT_MUSIC_MODEL_ID
