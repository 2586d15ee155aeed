"""
Serverless handler tests
Each task type is driven through `handler.handler` with Replicate patched out.
"""

import pytest

import handler as serverless


@pytest.mark.integration
class TestServerlessHandler:

    def test_generate_is_default_task(self, fake_replicate):
        fake = fake_replicate()
        result = serverless.handler(
            {"id": "job-1", "input": {"modelId": "flux-schnell", "prompt": "castle", "numOutputs": 2}}
        )
        assert result["success"] is True
        assert result["model"] == "Flux Schnell"
        assert len(result["images"]) == 2
        assert result["error_message"] is None
        assert fake.calls[0][0] == "black-forest-labs/flux-schnell"

    def test_generate_requires_prompt_and_model(self, fake_replicate):
        fake = fake_replicate()
        result = serverless.handler({"id": "job-2", "input": {"task_type": "generate", "prompt": "x"}})
        assert result["success"] is False
        assert "modelId" in result["error_message"]
        assert fake.calls == []

    def test_generate_accepts_snake_case_model_id(self, fake_replicate):
        fake = fake_replicate()
        result = serverless.handler({"input": {"model_id": "flux-dev", "prompt": "castle"}})
        assert result["success"] is True
        assert result["model"] == "Flux Dev"
        assert fake.calls[0][0] == "black-forest-labs/flux-dev"

    def test_generate_invalid_field(self, fake_replicate):
        result = serverless.handler(
            {"input": {"modelId": "flux-dev", "prompt": "x", "numOutputs": 0}}
        )
        assert result["success"] is False
        assert "numOutputs" in result["error_message"]

    def test_generate_domain_error(self, fake_replicate):
        fake = fake_replicate()
        result = serverless.handler({"input": {"modelId": "flux-redux", "prompt": "x"}})
        assert result["success"] is False
        assert "requires a reference image" in result["error_message"]
        assert fake.calls == []

    def test_generate_without_api_key(self, no_api_key):
        result = serverless.handler({"input": {"modelId": "flux-dev", "prompt": "x"}})
        assert result == {
            "success": False,
            "images": [],
            "model": None,
            "error_message": "Replicate API token not configured",
        }

    def test_music_task(self, fake_replicate):
        fake_replicate(outcomes=[["https://replicate.delivery/a.wav"]])
        result = serverless.handler({"input": {"task_type": "music", "prompt": "lofi", "duration": 2}})
        assert result["success"] is True
        assert result["tracks"] == [
            {
                "url": "https://replicate.delivery/a.wav",
                "modelName": "MusicGen (instrumental)",
                "duration": 5,
            }
        ]

    def test_remove_background_task(self, monkeypatch):
        monkeypatch.setattr(serverless, "remove_background", lambda image: "QUJD")
        result = serverless.handler(
            {"input": {"task_type": "remove_background", "image": "https://a/0.png"}}
        )
        assert result == {"success": True, "image_base64": "QUJD", "error_message": None}

    def test_remove_background_requires_image(self):
        result = serverless.handler({"input": {"task_type": "remove_background"}})
        assert result["success"] is False
        assert result["image_base64"] is None

    def test_unknown_task_type(self):
        result = serverless.handler({"input": {"task_type": "upscale"}})
        assert result == {"success": False, "error_message": "Unknown task_type: upscale"}
