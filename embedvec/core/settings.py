"""Settings loading and validation utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


# Repository root (two levels above embedvec/core/)
REPO_ROOT = Path(__file__).resolve().parents[2]

# Environment variables that override the configured provider names
_PROVIDER_ENV_OVERRIDES = {
    "EMBEDVEC_EMBEDDING_PROVIDER": ("embedding", "provider"),
    "EMBEDVEC_VECTOR_STORE_PROVIDER": ("vector_store", "provider"),
}


def resolve_path(relative: str | Path) -> Path:
    """Resolve a repository-relative path to an absolute path.

    Absolute inputs are returned unchanged.

    Args:
        relative: Path relative to the repository root.

    Returns:
        Absolute path, independent of the current working directory.
    """
    path = Path(relative)
    if path.is_absolute():
        return path
    return REPO_ROOT / path


@dataclass(slots=True)
class Settings:
    """Application settings structure.

    Attributes:
        embedding: Embedding configuration dictionary.
        vector_store: Vector store configuration dictionary.
        search: Search configuration dictionary.
        docs: Documentation lint configuration dictionary.
        observability: Observability configuration dictionary.
        raw: Original full settings dictionary.
    """

    embedding: dict[str, Any]
    vector_store: dict[str, Any]
    search: dict[str, Any]
    docs: dict[str, Any]
    observability: dict[str, Any]
    raw: dict[str, Any]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Build settings from an already-parsed mapping (no validation)."""
        return cls(
            embedding=data.get("embedding") or {},
            vector_store=data.get("vector_store") or {},
            search=data.get("search") or {},
            docs=data.get("docs") or {},
            observability=data.get("observability") or {},
            raw=data,
        )


def _require_path(data: dict[str, Any], dotted_path: str) -> None:
    current: Any = data
    for key in dotted_path.split("."):
        if not isinstance(current, dict) or key not in current:
            raise ValueError(f"Missing required settings field: {dotted_path}")
        current = current[key]


def validate_settings(settings: Settings) -> None:
    """Validate required settings fields.

    Args:
        settings: Parsed settings object.

    Raises:
        ValueError: If any required field is missing.
    """

    required_paths = [
        "embedding",
        "embedding.provider",
        "vector_store",
        "vector_store.provider",
        "search",
    ]

    for path in required_paths:
        _require_path(settings.raw, path)


def _apply_env_overrides(parsed: dict[str, Any]) -> None:
    for env_name, (section, key) in _PROVIDER_ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        target = parsed.get(section)
        if not isinstance(target, dict):
            target = {}
            parsed[section] = target
        target[key] = value


def load_settings(path: str | Path) -> Settings:
    """Load YAML settings from a file and validate required fields.

    Provider names can be overridden with ``EMBEDVEC_EMBEDDING_PROVIDER``
    and ``EMBEDVEC_VECTOR_STORE_PROVIDER``.

    Args:
        path: Path to the YAML settings file.

    Returns:
        Parsed and validated settings object.

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If YAML is invalid or required fields are missing.
    """

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as fp:
        try:
            parsed = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in settings file {settings_path}: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("Settings file must contain a YAML mapping at top level")

    _apply_env_overrides(parsed)

    settings = Settings.from_dict(parsed)
    validate_settings(settings)
    return settings
