"""Background removal input handling (rembg itself is patched out)."""

import base64
from io import BytesIO
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from bg_removal import remover


def _png_data_uri(color=(255, 0, 0)) -> str:
    buffer = BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("utf-8")


@pytest.fixture
def fake_rembg(monkeypatch):
    monkeypatch.setattr(remover, "_get_session", lambda: object())
    monkeypatch.setattr(remover, "remove", lambda image, session=None: image.convert("RGBA"))


@pytest.mark.unit
class TestRemoveBackground:

    def test_data_uri_input(self, fake_rembg):
        encoded = remover.remove_background(_png_data_uri())
        image = Image.open(BytesIO(base64.b64decode(encoded)))
        assert image.format == "PNG"
        assert image.mode == "RGBA"
        assert image.size == (8, 8)

    def test_url_input_is_downloaded(self, fake_rembg):
        png = base64.b64decode(_png_data_uri().split(",", 1)[1])
        response = MagicMock(content=png)
        with patch.object(remover.requests, "get", return_value=response) as get:
            remover.remove_background("https://replicate.delivery/out.png")
        get.assert_called_once_with("https://replicate.delivery/out.png", timeout=30)
        response.raise_for_status.assert_called_once()

    def test_data_uri_wrapper(self, fake_rembg):
        assert remover.remove_background_to_data_uri(_png_data_uri()).startswith(
            remover.DATA_URI_PREFIX
        )

    def test_local_paths_are_rejected(self, fake_rembg):
        with pytest.raises(ValueError):
            remover.remove_background("/etc/hosts")

    def test_invalid_base64(self, fake_rembg):
        with pytest.raises(ValueError):
            remover.remove_background("data:image/png;base64,@@not-base64@@")
