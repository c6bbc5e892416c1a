"""Test configuration reading from multiple sources."""

import os
from datetime import timedelta
from unittest.mock import patch

import pytest

from persona_relay.configs.config import AppConfig, get_app_config

_CLEAN_ENV = {"OPENAI_API_KEY": "", "RELAY_OPENAI_API_KEY": ""}


class TestConfigDefaults:
    def test_defaults(self):
        with patch.dict(os.environ, _CLEAN_ENV, clear=False):
            config = AppConfig(_env_file=None)

        assert config.provider.model_name == "gpt-4o-mini"
        assert config.provider.max_tokens == 150
        assert config.provider.temperature == 0.9
        assert config.provider.timeout == timedelta(seconds=30)
        assert config.chat.max_history_turns == 20
        assert config.chat.default_session_id == "default"
        assert config.api.port == 3456
        assert config.api.cors_allow_origin == "*"
        assert not config.has_credential


class TestConfigSources:
    """Test configuration loading from multiple sources."""

    def test_config_env_vars_work(self):
        env_vars = {
            "RELAY_CHAT__MAX_HISTORY_TURNS": "8",
            "RELAY_SESSIONS__MAX_SESSIONS": "50",
            "RELAY_PROVIDER__MODEL_NAME": "gpt-4o",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig(_env_file=None)

        assert config.chat.max_history_turns == 8
        assert config.sessions.max_sessions == 50
        assert config.provider.model_name == "gpt-4o"

    def test_plain_openai_api_key_is_read(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-from-env"}, clear=False):
            config = AppConfig(_env_file=None)

        assert config.openai_api_key == "sk-from-env"
        assert config.has_credential

    def test_blank_key_means_degraded(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "   "}, clear=False):
            config = AppConfig(_env_file=None)

        assert not config.has_credential

    def test_dotenv_file_overrides_environment(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_API_KEY=sk-from-file\n")

        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-from-env"}, clear=False):
            config = AppConfig(_env_file=env_file)

        assert config.openai_api_key == "sk-from-file"

    def test_init_kwargs_win(self):
        with patch.dict(os.environ, {"RELAY_API__PORT": "9999"}, clear=False):
            config = AppConfig(_env_file=None, api={"port": 4000})

        assert config.api.port == 4000

    def test_invalid_history_bound_rejected(self):
        with patch.dict(os.environ, {"RELAY_CHAT__MAX_HISTORY_TURNS": "0"}, clear=False):
            with pytest.raises(ValueError):
                AppConfig(_env_file=None)


class TestGetAppConfig:
    def test_singleton_get_app_config(self):
        get_app_config.reset()
        try:
            config1 = get_app_config()
            config2 = get_app_config()

            assert config1 is config2
            assert isinstance(config1, AppConfig)
        finally:
            get_app_config.reset()

    def test_reset_rebuilds(self):
        get_app_config.reset()
        try:
            first = get_app_config()
            get_app_config.reset()
            assert get_app_config() is not first
        finally:
            get_app_config.reset()
