"""Application and persona configuration."""

from .config import AppConfig, get_app_config  # noqa: F401
from .persona import PersonaConfig, load_persona  # noqa: F401
