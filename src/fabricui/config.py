"""Configuration loading and validation for FabricUI."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import tomllib
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigValidationError

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "fabricui"
CONFIG_PATH = CONFIG_DIR / "config.toml"
ENV_PREFIX = "FABRICUI_"

DEFAULT_MODELS = [
    "gpt-4o",
    "gpt-4o-mini",
    "claude-3-5-sonnet-20241022",
    "llama3.1:latest",
]
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    """Runtime settings for the web front end and the external tool."""

    fabric_path: str = "fabric"
    transcript_path: str = "yt"
    patterns_dir: Path = Path.home() / ".config" / "fabric" / "patterns"
    models: List[str] = Field(default_factory=lambda: list(DEFAULT_MODELS))
    timeout_seconds: float = Field(default=300.0, ge=0)
    failure_policy: Literal["discard", "record"] = "discard"
    strict_selections: bool = False
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    log_level: str = "INFO"
    structured_logs: bool = True
    host: str = "127.0.0.1"
    port: int = Field(default=8050, ge=1, le=65535)
    debug: bool = False

    @field_validator("fabric_path", "transcript_path", mode="before")
    @classmethod
    def _validate_program(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Expected a string value.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("Program path must not be empty.")
        return normalized

    @field_validator("models", mode="before")
    @classmethod
    def _split_models(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> str:
        normalized = str(value).strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}.")
        return normalized

    @property
    def timeout(self) -> Optional[float]:
        """Invocation timeout in seconds, or None when disabled."""
        return self.timeout_seconds or None


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigValidationError(f"Unable to read config file {path}: {exc}") from exc
    # Accept both a flat file and one with a [fabricui] table.
    section = data.get("fabricui", data)
    if not isinstance(section, dict):
        raise ConfigValidationError(f"Config file {path} has no usable table.")
    return dict(section)


def _read_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in Settings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            overrides[name] = environ[key]
    return overrides


def load_settings(
    path: Optional[os.PathLike] = None, environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """Build settings from defaults, the TOML file and the environment.

    Later sources win: environment variables override the file, which
    overrides the defaults.
    """
    environ = os.environ if environ is None else environ
    if path is None:
        path = environ.get(ENV_PREFIX + "CONFIG") or CONFIG_PATH
    config_path = Path(path).expanduser()

    merged = _read_toml(config_path)
    merged.update(_read_environ(environ))
    try:
        settings = Settings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc

    LOGGER.debug("Loaded settings from %s", config_path)
    return settings
