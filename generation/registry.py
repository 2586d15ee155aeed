"""Static catalog of the Replicate models this service can call.

The tables are built once at import time and never mutated; lookups are
exact matches on the model id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from config import get_music_model_id
from generation.errors import UnknownModelError


class SpeedClass(str, Enum):
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class ModelFamily(str, Enum):
    """Tag selecting the request shaping rule for a model."""

    FLUX = "flux"
    FLUX_REDUX = "flux_redux"
    PHOTOMAKER = "photomaker"
    FACE_REFERENCE = "face_reference"
    SDXL = "sdxl"
    SD35 = "sd35"
    DEFAULT = "default"


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    name: str
    replicate_id: str
    family: ModelFamily
    description: str
    style: str
    speed: SpeedClass
    supports_image: bool
    supports_background: bool = False


@dataclass(frozen=True)
class MusicModel:
    id: str
    name: str
    replicate_id: str
    description: str


MODELS: tuple[ModelDescriptor, ...] = (
    # Character reference models (use with a reference image)
    ModelDescriptor(
        id="flux-redux",
        name="Flux Redux",
        replicate_id="black-forest-labs/flux-redux-dev",
        family=ModelFamily.FLUX_REDUX,
        description="Image variations - keeps character features",
        style="Character Reference",
        speed=SpeedClass.MEDIUM,
        supports_image=True,
    ),
    ModelDescriptor(
        id="photomaker",
        name="PhotoMaker",
        replicate_id="tencentarc/photomaker:ddfc2b08d209f9fa8c1eca692712918bd449f695dabb4a958da31802a9570fe4",
        family=ModelFamily.PHOTOMAKER,
        description="Best for consistent character identity",
        style="Character Reference",
        speed=SpeedClass.MEDIUM,
        supports_image=True,
    ),
    ModelDescriptor(
        id="photomaker-style",
        name="PhotoMaker Style",
        replicate_id="tencentarc/photomaker-style:467d062309da518648ba89d226490e02b8ed09b5abc15026e54e31c5a8cd0769",
        family=ModelFamily.PHOTOMAKER,
        description="Character + comic/illustration style",
        style="Character + Style",
        speed=SpeedClass.MEDIUM,
        supports_image=True,
    ),
    ModelDescriptor(
        id="instant-id",
        name="InstantID",
        replicate_id="zsxkib/instant-id:2e4785a4d80dadf580077b2244c8d7c05d8e3faac04a04c02d8e099dd2876789",
        family=ModelFamily.FACE_REFERENCE,
        description="Needs face photo - realistic consistency",
        style="Face Reference",
        speed=SpeedClass.MEDIUM,
        supports_image=True,
    ),
    ModelDescriptor(
        id="sdxl",
        name="SDXL (img2img)",
        replicate_id="stability-ai/sdxl:7762fd07cf82c948538e41f63f77d685e02b063e37e496e96eefd46c929f9bdc",
        family=ModelFamily.SDXL,
        description="Use reference as starting point",
        style="Versatile",
        speed=SpeedClass.MEDIUM,
        supports_image=True,
        supports_background=True,
    ),
    # Anime text-to-image models
    ModelDescriptor(
        id="animagine-xl-31",
        name="Animagine XL 3.1",
        replicate_id="cjwbw/animagine-xl-3.1:6afe2e6b27dad2d6f480b59195c221884b6acc589ff4d05ff0e5fc058690fbb9",
        family=ModelFamily.DEFAULT,
        description="Best anime model - high quality characters",
        style="Modern Anime",
        speed=SpeedClass.MEDIUM,
        supports_image=False,
        supports_background=True,
    ),
    ModelDescriptor(
        id="anything-v4",
        name="Anything V4",
        replicate_id="cjwbw/anything-v4.0:42a996d39a96aedc57b2e0aa8105dea39c9c89d9d266caf6bb4327a1c191b061",
        family=ModelFamily.DEFAULT,
        description="Versatile anime style generator",
        style="Classic Anime",
        speed=SpeedClass.FAST,
        supports_image=False,
        supports_background=True,
    ),
    ModelDescriptor(
        id="dreamshaper-xl",
        name="DreamShaper XL",
        replicate_id="lucataco/dreamshaper-xl-turbo:0a1710e0187b01a255302738ca0158ff02a22f4638679533e111082f9dd1b615",
        family=ModelFamily.DEFAULT,
        description="Fantasy and dreamy anime styles",
        style="Fantasy Anime",
        speed=SpeedClass.FAST,
        supports_image=False,
        supports_background=True,
    ),
    ModelDescriptor(
        id="sd35-large",
        name="Stable Diffusion 3.5 Large",
        replicate_id="stability-ai/stable-diffusion-3.5-large",
        family=ModelFamily.SD35,
        description="Strong prompt following and typography",
        style="Versatile",
        speed=SpeedClass.SLOW,
        supports_image=False,
        supports_background=True,
    ),
    # Flux models
    ModelDescriptor(
        id="flux-schnell",
        name="Flux Schnell",
        replicate_id="black-forest-labs/flux-schnell",
        family=ModelFamily.FLUX,
        description="Fastest model - great for anime with right prompts",
        style="Versatile",
        speed=SpeedClass.FAST,
        supports_image=False,
        supports_background=True,
    ),
    ModelDescriptor(
        id="flux-dev",
        name="Flux Dev",
        replicate_id="black-forest-labs/flux-dev",
        family=ModelFamily.FLUX,
        description="High-quality Flux - detailed anime art",
        style="Versatile",
        speed=SpeedClass.MEDIUM,
        supports_image=False,
        supports_background=True,
    ),
)

MUSIC_MODELS: tuple[MusicModel, ...] = (
    MusicModel(
        id="musicgen",
        name="MusicGen (instrumental)",
        replicate_id=get_music_model_id(),
        description="Prompt-to-music, best for instrumental BG loops",
    ),
)

_MODELS_BY_ID: Dict[str, ModelDescriptor] = {model.id: model for model in MODELS}
_MUSIC_MODELS_BY_ID: Dict[str, MusicModel] = {model.id: model for model in MUSIC_MODELS}


def resolve(model_id: str) -> ModelDescriptor:
    """Return the descriptor for `model_id` or raise UnknownModelError."""
    try:
        return _MODELS_BY_ID[model_id]
    except KeyError:
        raise UnknownModelError(model_id) from None


def list_models() -> List[ModelDescriptor]:
    return list(MODELS)


def resolve_music(model_id: Optional[str] = None) -> MusicModel:
    """Return the music model for `model_id`, falling back to the first one."""
    if model_id and model_id in _MUSIC_MODELS_BY_ID:
        return _MUSIC_MODELS_BY_ID[model_id]
    return MUSIC_MODELS[0]


def list_music_models() -> List[MusicModel]:
    return list(MUSIC_MODELS)
