"""Sub-batch dispatch against the remote inference call.

A request for N outputs is split into sub-batches no larger than the model's
per-call cap. Sub-batches run one after another; a failing sub-batch is
logged and skipped so the others can still contribute outputs.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Dict, List, Optional

from generation.errors import (
    GenerationFailedError,
    UpstreamValidationError,
    summarize_error,
    translate_failure,
)

logger = logging.getLogger(__name__)

RunModel = Callable[[str, Dict[str, Any]], Any]

GENERATION_FAILED_MESSAGE = "Failed to generate images. Please try a different model."


def _locator_from_object(item: Any) -> Optional[str]:
    url = getattr(item, "url", None)
    if callable(url):
        url = url()
    if url is None:
        return None
    # Some clients hand back URL objects rather than plain strings.
    href = getattr(url, "href", None)
    locator = str(url) if href is None else href
    return locator or None


def normalize_output(output: Any) -> List[str]:
    """Flatten any remote result shape into an ordered list of locators.

    Handles a bare string, a mapping with a ``url`` key, an object exposing
    ``url`` (attribute or method), and lists or iterators of any of these.
    Undecodable bytes raise ``ValueError``.
    """
    if output is None:
        return []
    if isinstance(output, str):
        return [output] if output else []
    if isinstance(output, bytes):
        try:
            text = output.decode("utf-8")
        except UnicodeDecodeError:
            raise ValueError("Model returned raw file bytes instead of a URL") from None
        return [text] if text else []
    if isinstance(output, Mapping):
        url = output.get("url")
        return [str(url)] if url else []

    if hasattr(output, "url"):
        locator = _locator_from_object(output)
        return [locator] if locator is not None else []

    if isinstance(output, Iterable):
        locators: List[str] = []
        for item in output:
            locators.extend(normalize_output(item))
        return locators

    return [str(output)]


def plan_batches(total: int, max_per_call: Optional[int]) -> List[int]:
    """Return the per-call output counts for `total` outputs."""
    if total <= 0:
        return []
    if not max_per_call or max_per_call >= total:
        return [total]

    sizes: List[int] = []
    planned = 0
    for _ in range(math.ceil(total / max_per_call)):
        size = min(max_per_call, total - planned)
        sizes.append(size)
        planned += size
    return sizes


def dispatch(
    run_model: RunModel,
    model_ref: str,
    template: Dict[str, Any],
    max_per_call: Optional[int],
    total: int,
) -> List[str]:
    """Issue every sub-batch and return at most `total` locators.

    Raises:
        UpstreamValidationError: nothing was produced and a failure matched a
            known upstream pattern.
        GenerationFailedError: nothing was produced otherwise.
    """
    locators: List[str] = []
    failures: List[str] = []
    batches = plan_batches(total, max_per_call)

    for index, batch_size in enumerate(batches, start=1):
        payload = dict(template)
        payload["num_outputs"] = batch_size
        try:
            # Streamed results are lazy, so reading them can fail too.
            produced = normalize_output(run_model(model_ref, payload))
        except Exception as exc:  # noqa: BLE001
            message = summarize_error(exc)
            failures.append(message)
            logger.error(
                "Sub-batch %d/%d for %s failed: %s", index, len(batches), model_ref, message
            )
            continue

        logger.debug(
            "Sub-batch %d/%d for %s produced %d output(s)",
            index,
            len(batches),
            model_ref,
            len(produced),
        )
        locators.extend(produced)

    if not locators:
        for message in failures:
            friendly = translate_failure(message)
            if friendly:
                raise UpstreamValidationError(friendly)
        raise GenerationFailedError(GENERATION_FAILED_MESSAGE, failures=failures)

    if failures:
        logger.warning(
            "%s: %d of %d sub-batches failed, returning %d output(s)",
            model_ref,
            len(failures),
            len(batches),
            min(len(locators), total),
        )
    return locators[:total]
