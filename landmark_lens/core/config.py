"""Application configuration (Pydantic v2). Load from landmark_lens.yml with optional env override."""

import os
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, field_validator


DEFAULT_DATABASE_URL = "postgresql+psycopg2://localhost/landmark_lens"
DEFAULT_CONFIG_ENV_VAR = "LANDMARK_LENS_CONFIG"
DEFAULT_CONFIG_FILENAME = "landmark_lens.yml"
VISION_API_KEY_ENV = "GOOGLE_VISION_API_KEY"

# Environment variable -> Settings field. Applied on top of the YAML file unless
# the caller passed an explicit config path.
ENV_OVERRIDES: dict[str, str] = {
    "DATABASE_URL": "database_url",
    "LANDMARK_LENS_VISION_BACKEND": "vision_backend",
    "LANDMARK_LENS_LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    """
    Service config loaded from YAML.

    The vision API key is never read from YAML; it comes from GOOGLE_VISION_API_KEY only.
    Settings are frozen: reload through get_config(path) or reset_config().
    """

    model_config = {"extra": "ignore", "frozen": True}

    database_url: str = DEFAULT_DATABASE_URL
    vision_backend: Literal["heuristic", "google"] = "heuristic"
    analysis_method: Literal["primary", "secondary", "tertiary"] = "primary"
    vision_timeout_seconds: float = 5.0
    vision_language_hint: str = "en"
    max_image_bytes: int = 10 * 1024 * 1024
    catalog_limit: int = 10
    log_level: str = "INFO"

    @field_validator("catalog_limit")
    @classmethod
    def positive_catalog_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("catalog_limit must be at least 1")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> str:
        return str(v or "INFO").upper()


class ConfigLoader:
    """Builds Settings from an optional YAML file plus ENV_OVERRIDES read from env."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env

    def _env_values(self) -> dict[str, str]:
        return {field: self._env[var] for var, field in ENV_OVERRIDES.items() if self._env.get(var)}

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        raw = yaml.safe_load(path.read_text()) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(raw).__name__}")
        return raw

    def load_from_yaml(self, path: Path, apply_env_override: bool) -> Settings:
        values = self._read_yaml(Path(path))
        if apply_env_override:
            values.update(self._env_values())
        return Settings.model_validate(values)

    def load_default(self) -> Settings:
        """Settings from LANDMARK_LENS_CONFIG (or ./landmark_lens.yml when present), env overrides applied."""
        path = Path(self._env.get(DEFAULT_CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILENAME)
        if path.is_file():
            return self.load_from_yaml(path, apply_env_override=True)
        return Settings.model_validate(self._env_values())


_loader = ConfigLoader()
_config: Settings | None = None


def get_config(config_path: str | Path | None = None) -> Settings:
    """
    Return the process-wide Settings.

    An explicit config_path is loaded verbatim (no env overrides) and replaces the cached value.
    """
    global _config
    if config_path is not None:
        _config = _loader.load_from_yaml(Path(config_path), apply_env_override=False)
    elif _config is None:
        _config = _loader.load_default()
    return _config


def get_vision_api_key() -> str | None:
    """Return the vision API key from the environment, or None when unset or blank."""
    key = os.environ.get(VISION_API_KEY_ENV, "").strip()
    return key or None


def reset_config() -> None:
    """Clear cached config (for tests)."""
    global _config
    _config = None
