"""Smoke-check every catalog model against Replicate.

Run with: python check_models.py [--model ID ...]
Requires REPLICATE_API_KEY (read from the environment, .env.local or .env).
Models that need a reference image are skipped.
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Dict, List, Optional, Sequence

import config
from generation import registry
from generation.errors import UnknownModelError, summarize_error
from generation.registry import ModelDescriptor
from generation.shaping import rule_for
from infer import run_model

CHECK_PROMPT = "masterpiece, best quality, anime style, 1girl with blue hair"


def check_model(model: ModelDescriptor) -> Dict[str, object]:
    """Issue a single one-output call for `model` and report how it went."""
    if rule_for(model).requires_image:
        print(f"SKIP  {model.name} (requires reference image)")
        return {"id": model.id, "name": model.name, "status": "skipped"}

    start = time.monotonic()
    print(f"Testing {model.name}... ", end="", flush=True)
    try:
        run_model(model.replicate_id, {"prompt": CHECK_PROMPT, "num_outputs": 1})
    except Exception as exc:  # noqa: BLE001
        elapsed = time.monotonic() - start
        error = summarize_error(exc, limit=80)
        print(f"FAILED ({elapsed:.1f}s): {error}")
        return {"id": model.id, "name": model.name, "status": "failed", "error": error, "duration": elapsed}

    elapsed = time.monotonic() - start
    print(f"OK ({elapsed:.1f}s)")
    return {"id": model.id, "name": model.name, "status": "ok", "duration": elapsed}


def _select_models(model_ids: Optional[Sequence[str]]) -> List[ModelDescriptor]:
    if not model_ids:
        return registry.list_models()
    return [registry.resolve(model_id) for model_id in model_ids]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check that the catalog models run on Replicate.")
    parser.add_argument(
        "--model",
        action="append",
        dest="models",
        metavar="ID",
        help="Only check this model id (repeatable).",
    )
    args = parser.parse_args(argv)

    if not config.get_replicate_api_key():
        print("ERROR: REPLICATE_API_KEY environment variable not set", file=sys.stderr)
        return 1

    try:
        models = _select_models(args.models)
    except UnknownModelError as exc:
        print(f"ERROR: unknown model id '{exc.model_id}'", file=sys.stderr)
        return 1

    print(f"Testing {len(models)} models...\n")
    results = [check_model(model) for model in models]

    working = [r for r in results if r["status"] == "ok"]
    failed = [r for r in results if r["status"] == "failed"]

    print("\n=== Summary ===")
    print(f"Working: {len(working)}/{len(results)}")
    for result in working:
        print(f"   ok     {result['name']}")
    for result in failed:
        print(f"   failed {result['name']}: {result['error']}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
