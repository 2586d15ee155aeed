"""Model smoke-check CLI."""

import pytest

import check_models
from fakes import FakeReplicate
from generation import registry


@pytest.mark.unit
class TestCheckModels:

    def test_skips_models_that_need_an_image(self, monkeypatch, capsys):
        fake = FakeReplicate()
        monkeypatch.setattr(check_models, "run_model", fake)
        result = check_models.check_model(registry.resolve("photomaker"))
        assert result["status"] == "skipped"
        assert fake.calls == []
        assert "requires reference image" in capsys.readouterr().out

    def test_all_models_ok(self, api_key, monkeypatch, capsys):
        fake = FakeReplicate()
        monkeypatch.setattr(check_models, "run_model", fake)
        assert check_models.main([]) == 0
        checked = {ref for ref, _ in fake.calls}
        assert "black-forest-labs/flux-dev" in checked
        assert "black-forest-labs/flux-redux-dev" not in checked
        assert all(payload["num_outputs"] == 1 for _, payload in fake.calls)
        assert "Working:" in capsys.readouterr().out

    def test_failure_sets_exit_code(self, api_key, monkeypatch, capsys):
        fake = FakeReplicate(outcomes=[RuntimeError("version does not exist\ntrace")])
        monkeypatch.setattr(check_models, "run_model", fake)
        assert check_models.main(["--model", "flux-dev"]) == 1
        out = capsys.readouterr().out
        assert "version does not exist" in out
        assert "trace" not in out

    def test_unknown_model_id(self, api_key, capsys):
        assert check_models.main(["--model", "ghost"]) == 1
        assert "ghost" in capsys.readouterr().err

    def test_missing_api_key(self, no_api_key, capsys):
        assert check_models.main([]) == 1
        assert "REPLICATE_API_KEY" in capsys.readouterr().err
