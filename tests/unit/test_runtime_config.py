"""
Runtime configuration: defaults, files, environment overrides.
"""

import json

import pytest

from core.config import RuntimeConfig, load_runtime_config


class TestDefaults:
    def test_settlement_defaults(self):
        config = RuntimeConfig()
        assert config.pipeline.settle_threshold == 0.85
        assert config.pipeline.defer_threshold == 0.70
        assert config.pipeline.execute_deterministic is False
        assert config.pipeline.max_workers == 1
        assert config.llm.provider == "anthropic"
        assert config.llm.api_key is None

    def test_api_key_read_from_provider_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        config = RuntimeConfig.from_dict({"llm": {"provider": "openai"}})
        assert config.llm.api_key == "sk-test"


class TestFiles:
    def test_json_file(self, tmp_path):
        path = tmp_path / "oracle.json"
        path.write_text(json.dumps({
            "llm": {"provider": "mock"},
            "pipeline": {"settle_threshold": 0.9, "max_workers": 4},
            "log_level": "DEBUG",
        }))

        config = RuntimeConfig.from_file(path)

        assert config.llm.provider == "mock"
        assert config.pipeline.settle_threshold == 0.9
        assert config.pipeline.max_workers == 4
        assert config.pipeline.defer_threshold == 0.70
        assert config.log_level == "DEBUG"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "oracle.yaml"
        path.write_text("pipeline:\n  execute_deterministic: true\nproviders:\n  max_results_per_query: 5\n")

        config = RuntimeConfig.from_file(path)

        assert config.pipeline.execute_deterministic is True
        assert config.providers.max_results_per_query == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_file(tmp_path / "nope.json")

    def test_search_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "oracle.json").write_text(json.dumps({"pipeline": {"max_workers": 3}}))
        assert load_runtime_config().pipeline.max_workers == 3


class TestEnvOverrides:
    def test_env_over_file(self, tmp_path, monkeypatch):
        path = tmp_path / "oracle.json"
        path.write_text(json.dumps({"pipeline": {"max_workers": 2}}))
        monkeypatch.setenv("ORACLE_MAX_WORKERS", "6")
        monkeypatch.setenv("ORACLE_EXECUTE_DETERMINISTIC", "true")
        monkeypatch.setenv("GNEWS_API_KEY", "gnews-key")

        config = load_runtime_config(path)

        assert config.pipeline.max_workers == 6
        assert config.pipeline.execute_deterministic is True
        assert config.providers.gnews_api_key == "gnews-key"

    def test_provider_override_picks_up_its_key(self, monkeypatch):
        monkeypatch.setenv("ORACLE_LLM_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")

        config = RuntimeConfig().with_env_overrides()

        assert config.llm.provider == "openai"
        assert config.llm.api_key == "sk-openai"

    def test_no_overrides_returns_same_object(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_to_dict_omits_secrets(self):
        config = RuntimeConfig.from_dict({"llm": {"api_key": "secret"}, "providers": {"gnews_api_key": "g"}})
        payload = json.dumps(config.to_dict())
        assert "secret" not in payload
        assert config.to_dict()["providers"]["gnews_configured"] is True
