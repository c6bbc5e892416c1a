"""Persona model and loader.

A persona bundles the fixed system prompt with two curated reply lists:

* ``degraded_replies`` -- served when no provider credential is configured.
* ``failure_replies`` -- served by the HTTP adapter when the provider fails.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from .personas import BUILTIN_PERSONAS


class PersonaConfig(BaseModel):
    """Author persona configuration."""

    name: str = Field(description="Persona display name")
    system_prompt: str = Field(
        min_length=1, description="Fixed system prompt sent before the history"
    )
    degraded_replies: list[str] = Field(
        min_length=1,
        description="In-character lines used when no credential is configured",
    )
    failure_replies: list[str] = Field(
        default_factory=list,
        description="In-character lines used when the provider call fails; "
        "empty means provider failures surface as 500",
    )


def load_persona_file(path: Path) -> PersonaConfig:
    """Load a persona definition from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Persona file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return PersonaConfig(**data)


def load_persona(name: str, path: Path | None = None) -> PersonaConfig:
    """Resolve a persona: YAML *path* when given, else the built-in *name*."""
    if path is not None:
        return load_persona_file(path)
    try:
        return PersonaConfig(**BUILTIN_PERSONAS[name])
    except KeyError:
        known = ", ".join(sorted(BUILTIN_PERSONAS))
        raise ValueError(f"Unknown persona {name!r} (known: {known})") from None
