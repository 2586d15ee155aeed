"""
Shared fixtures.

The Replicate call is always replaced by `FakeReplicate`, so no test touches
the network or needs a real token.
"""

from typing import Any, Dict, List, Optional

import pytest

import infer
from fakes import FakeReplicate


@pytest.fixture
def api_key(monkeypatch):
    """Configure a dummy Replicate token."""
    monkeypatch.setenv("REPLICATE_API_KEY", "r8_test_token")
    monkeypatch.setattr(infer, "_CLIENT", None)
    return "r8_test_token"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("REPLICATE_API_KEY", raising=False)
    monkeypatch.setattr(infer, "_CLIENT", None)


@pytest.fixture
def fake_replicate(monkeypatch, api_key):
    """Patch the remote call; returns a factory taking optional outcomes."""

    def _install(outcomes: Optional[List[Any]] = None) -> FakeReplicate:
        fake = FakeReplicate(outcomes)
        monkeypatch.setattr(infer, "run_model", fake)
        return fake

    return _install


@pytest.fixture
def generation_payload() -> Dict[str, Any]:
    return {
        "modelId": "flux-dev",
        "prompt": "a girl with silver hair in a forest",
        "width": 1024,
        "height": 1024,
        "numOutputs": 1,
    }
