"""Per-family request shaping for Replicate models.

Each model family has one `ShapingRule` describing how a generation request
maps onto that family's input schema. `shape` is pure: it builds the payload
template for a request and reports how many outputs one upstream call may
produce. The dispatcher fills in `num_outputs` per sub-batch.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from generation.errors import ReferenceImageRequiredError
from generation.registry import ModelDescriptor, ModelFamily
from models import GenerationRequest

SHORT_NEGATIVE_PROMPT = "lowres, bad anatomy, bad hands, text, error, missing fingers"
DEFAULT_NEGATIVE_PROMPT = (
    "lowres, bad anatomy, bad hands, text, error, missing fingers, extra digit, "
    "fewer digits, cropped, worst quality, low quality"
)
SDXL_NEGATIVE_PREFIX = "lowres, bad anatomy, bad hands, "


class SizeMode(str, Enum):
    DIMENSIONS = "dimensions"
    ASPECT_RATIO = "aspect_ratio"


@dataclass(frozen=True)
class ShapingRule:
    family: ModelFamily
    size_mode: SizeMode = SizeMode.DIMENSIONS
    supports_negative_prompt: bool = True
    default_negative_prompt: Optional[str] = None
    # Prepended to a caller-supplied negative prompt.
    negative_prompt_prefix: Optional[str] = None
    # Upstream input name for the reference image; None means images are dropped.
    image_param: Optional[str] = None
    requires_image: bool = False
    # None means a single call may produce every requested output.
    max_outputs_per_call: Optional[int] = None
    extra_params: Mapping[str, Any] = field(default_factory=dict)
    trigger_word: Optional[str] = None


@dataclass(frozen=True)
class ShapedRequest:
    payload: Dict[str, Any]
    max_per_call: Optional[int]


SHAPING_RULES: Dict[ModelFamily, ShapingRule] = {
    ModelFamily.FLUX: ShapingRule(
        family=ModelFamily.FLUX,
        size_mode=SizeMode.ASPECT_RATIO,
        supports_negative_prompt=False,
        max_outputs_per_call=4,
    ),
    ModelFamily.FLUX_REDUX: ShapingRule(
        family=ModelFamily.FLUX_REDUX,
        size_mode=SizeMode.ASPECT_RATIO,
        supports_negative_prompt=False,
        image_param="redux_image",
        requires_image=True,
        max_outputs_per_call=4,
    ),
    ModelFamily.PHOTOMAKER: ShapingRule(
        family=ModelFamily.PHOTOMAKER,
        default_negative_prompt=DEFAULT_NEGATIVE_PROMPT,
        image_param="input_image",
        requires_image=True,
        max_outputs_per_call=4,
        trigger_word="img",
    ),
    ModelFamily.FACE_REFERENCE: ShapingRule(
        family=ModelFamily.FACE_REFERENCE,
        default_negative_prompt=DEFAULT_NEGATIVE_PROMPT,
        image_param="image",
        requires_image=True,
        max_outputs_per_call=1,
    ),
    ModelFamily.SDXL: ShapingRule(
        family=ModelFamily.SDXL,
        default_negative_prompt=SHORT_NEGATIVE_PROMPT,
        negative_prompt_prefix=SDXL_NEGATIVE_PREFIX,
        image_param="image",
    ),
    ModelFamily.SD35: ShapingRule(
        family=ModelFamily.SD35,
        extra_params={"output_format": "webp"},
    ),
    ModelFamily.DEFAULT: ShapingRule(
        family=ModelFamily.DEFAULT,
        default_negative_prompt=DEFAULT_NEGATIVE_PROMPT,
        image_param="image",
    ),
}


def rule_for(descriptor: ModelDescriptor) -> ShapingRule:
    return SHAPING_RULES.get(descriptor.family, SHAPING_RULES[ModelFamily.DEFAULT])


def aspect_ratio(width: int, height: int) -> str:
    """Collapse dimensions into the aspect ratio names Flux accepts."""
    if width == height:
        return "1:1"
    return "16:9" if width > height else "9:16"


def _build_prompt(rule: ShapingRule, prompt: str, prompt_prefix: str) -> str:
    text = f"{prompt_prefix}{prompt.strip()}"
    words = {word.strip(string.punctuation) for word in text.split()}
    if rule.trigger_word and rule.trigger_word not in words:
        text = f"{text} {rule.trigger_word}"
    return text


def _negative_prompt(rule: ShapingRule, supplied: Optional[str]) -> Optional[str]:
    if not rule.supports_negative_prompt:
        return None
    supplied = (supplied or "").strip()
    if not supplied:
        return rule.default_negative_prompt
    if rule.negative_prompt_prefix:
        return f"{rule.negative_prompt_prefix}{supplied}"
    return supplied


def shape(
    descriptor: ModelDescriptor,
    request: GenerationRequest,
    prompt_prefix: str = "",
) -> ShapedRequest:
    """Build the upstream payload template for `request` on `descriptor`.

    Raises:
        ReferenceImageRequiredError: the model's rule needs a reference image
            and the request has none.
    """
    rule = rule_for(descriptor)
    reference_image = request.reference_image or None

    if rule.requires_image and not reference_image:
        raise ReferenceImageRequiredError(descriptor.name)

    payload: Dict[str, Any] = {
        "prompt": _build_prompt(rule, request.prompt, prompt_prefix),
    }

    if rule.size_mode is SizeMode.ASPECT_RATIO:
        payload["aspect_ratio"] = aspect_ratio(request.width, request.height)
    else:
        payload["width"] = request.width
        payload["height"] = request.height

    negative_prompt = _negative_prompt(rule, request.negative_prompt)
    if negative_prompt:
        payload["negative_prompt"] = negative_prompt

    # Images sent to models that cannot use them are dropped silently.
    if reference_image and descriptor.supports_image and rule.image_param:
        payload[rule.image_param] = reference_image

    payload.update(rule.extra_params)
    return ShapedRequest(payload=payload, max_per_call=rule.max_outputs_per_call)
