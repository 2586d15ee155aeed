"""Model catalog lookups."""

import dataclasses

import pytest

from generation import registry
from generation.errors import UnknownModelError
from generation.registry import ModelFamily, SpeedClass
from generation.shaping import SHAPING_RULES


@pytest.mark.unit
class TestModelRegistry:

    def test_resolve_known_model(self):
        model = registry.resolve("flux-dev")
        assert model.name == "Flux Dev"
        assert model.replicate_id == "black-forest-labs/flux-dev"
        assert model.family is ModelFamily.FLUX
        assert model.speed is SpeedClass.MEDIUM
        assert model.supports_image is False

    def test_resolve_is_idempotent(self):
        first = registry.resolve("instant-id")
        second = registry.resolve("instant-id")
        assert first is second
        assert first == second

    def test_unknown_model_raises(self):
        with pytest.raises(UnknownModelError) as exc_info:
            registry.resolve("flux-dev-equivalent")
        assert exc_info.value.status_code == 400
        assert exc_info.value.model_id == "flux-dev-equivalent"

    def test_resolve_requires_exact_match(self):
        with pytest.raises(UnknownModelError):
            registry.resolve("FLUX-DEV")
        with pytest.raises(UnknownModelError):
            registry.resolve("flux")

    def test_descriptors_are_immutable(self):
        model = registry.resolve("sdxl")
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.name = "changed"

    def test_ids_are_unique(self):
        ids = [model.id for model in registry.list_models()]
        assert len(ids) == len(set(ids))

    def test_every_family_has_a_rule(self):
        for model in registry.list_models():
            assert model.family in SHAPING_RULES

    def test_list_models_keeps_catalog_order(self):
        ids = [model.id for model in registry.list_models()]
        assert ids[0] == "flux-redux"
        assert ids[-1] == "flux-dev"

    def test_resolve_music_falls_back_to_first_model(self):
        default = registry.list_music_models()[0]
        assert registry.resolve_music(None) is default
        assert registry.resolve_music("no-such-model") is default
        assert registry.resolve_music("musicgen") is default
