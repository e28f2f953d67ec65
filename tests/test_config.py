"""Tests for environment-driven configuration."""
import pytest

from core.config import DEFAULT_BASE_URL, StablesConfig, load_config
from core.errors import ConfigurationError


class TestLoadConfig:
    def test_missing_api_key_is_fatal(self):
        with pytest.raises(ConfigurationError, match="STABLES_API_KEY"):
            load_config({})

    def test_blank_api_key_is_fatal(self):
        with pytest.raises(ConfigurationError):
            load_config({"STABLES_API_KEY": "   "})

    def test_defaults_to_sandbox(self):
        config = load_config({"STABLES_API_KEY": "sk_live_abc"})
        assert config.api_key == "sk_live_abc"
        assert config.base_url == DEFAULT_BASE_URL

    def test_custom_base_url_loses_trailing_slash(self):
        config = load_config({
            "STABLES_API_KEY": "sk_live_abc",
            "STABLES_API_URL": "https://api.stables.money/",
        })
        assert config.base_url == "https://api.stables.money"

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("STABLES_API_KEY", "sk_env")
        monkeypatch.delenv("STABLES_API_URL", raising=False)
        assert load_config().api_key == "sk_env"


class TestStablesConfig:
    def test_repr_hides_api_key(self):
        config = StablesConfig(api_key="sk_secret_value")
        assert "sk_secret_value" not in repr(config)

    def test_is_immutable(self):
        config = StablesConfig(api_key="sk")
        with pytest.raises(AttributeError):
            config.base_url = "https://elsewhere"
