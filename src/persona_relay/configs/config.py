"""Relay settings, layered with pydantic-settings.

Sources, strongest first:

1. Init kwargs (programmatic construction, tests)
2. ConfigMap YAML (path from ``RELAY_CONFIGMAP_FILE`` env var)
3. ``.env`` dotenv file -- a local key file overrides the environment
4. Environment variables (``RELAY_`` prefix, plus ``OPENAI_API_KEY``)
5. Static YAML (``configs/config.yaml``)
6. File secrets
7. Field defaults

The provider credential is optional. Without it the relay runs in
degraded mode and answers from the persona's fixed reply list.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from persona_relay.infra.singleton import singleton

from .persona import PersonaConfig, load_persona
from .system import (
    APIConfig,
    ChatConfig,
    LoggingConfig,
    MetricsConfig,
    PersonaSelection,
    ProviderConfig,
    SessionConfig,
    TracingConfig,
)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

# src/persona_relay/configs/config.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"

_configmap_env = os.environ.get("RELAY_CONFIGMAP_FILE")
CONFIGMAP_CONFIG_FILE: Optional[Path] = Path(_configmap_env) if _configmap_env else None

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"  # RELAY_CHAT__MAX_HISTORY_TURNS -> chat.max_history_turns
ENV_PREFIX = "RELAY_"

DEFAULT_ENCODING = "utf-8"


class AppConfig(BaseSettings):
    """Everything the relay reads at startup."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "RELAY_OPENAI_API_KEY"),
        description="Provider credential; absent means degraded mode",
    )

    provider: ProviderConfig = Field(
        default_factory=ProviderConfig,
        description="Chat-completion provider settings",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Conversation history settings"
    )

    sessions: SessionConfig = Field(
        default_factory=SessionConfig, description="Session map bounds"
    )

    persona: PersonaSelection = Field(
        default_factory=PersonaSelection, description="Persona selection"
    )

    api: APIConfig = Field(
        default_factory=APIConfig, description="API configuration settings"
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging settings"
    )

    tracing: TracingConfig = Field(
        default_factory=TracingConfig, description="OpenTelemetry settings"
    )

    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig, description="Prometheus settings"
    )

    @property
    def has_credential(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())

    def load_persona(self) -> PersonaConfig:
        """Resolve the configured persona (YAML file first, then built-in)."""
        return load_persona(self.persona.name, self.persona.file)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings]

        # 2. ConfigMap YAML
        if CONFIGMAP_CONFIG_FILE is not None and CONFIGMAP_CONFIG_FILE.is_file():
            sources.append(
                YamlConfigSettingsSource(
                    settings_cls,
                    yaml_file=CONFIGMAP_CONFIG_FILE,
                )
            )

        # 3-4. Local .env beats the process environment
        sources.append(dotenv_settings)
        sources.append(env_settings)

        # 5. Static YAML
        sources.append(YamlConfigSettingsSource(settings_cls))

        # 6. File secrets
        sources.append(file_secret_settings)

        return tuple(sources)


@singleton
def get_app_config() -> AppConfig:
    """Process-wide ``AppConfig``.

    Read once per process so the credential is resolved at startup.
    """
    return AppConfig()
