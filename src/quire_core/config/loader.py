"""Quire configuration loader."""

import os
import re
import typing
from collections.abc import Callable
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from quire_core.errors import create_error
from quire_core.logging import get_logger
from quire_core.types import LogLevel, ValidationResult

from .models import QuireConfig

CONFIG_FILENAME = "quire.yaml"
CONFIG_PATH_ENV = "QUIRE_CONFIG_PATH"

# ${VAR}, ${VAR:-default}, ${VAR:?error message}
_ENV_REF = re.compile(r"\$\{([^}:]+)(?::([?-])([^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in a string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Raises:
        QuireError(CONFIG_INVALID): If a required variable is not set
    """

    def substitute(match: re.Match[str]) -> str:
        name, operator, operand = match.groups()
        if name in os.environ:
            return os.environ[name]
        if operator == "-":
            return operand or ""
        message = operand if operator == "?" and operand else f"Required environment variable {name} not set"
        raise create_error("CONFIG_INVALID", detail=message)

    return _ENV_REF.sub(substitute, value)


def resolve_env_vars_deep(data: Any) -> Any:
    """Resolve env var references in every string of a nested structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    if isinstance(data, dict):
        return {key: resolve_env_vars_deep(value) for key, value in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars_deep(item) for item in data]
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested dicts merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _positive_int(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return "must be a positive integer"
    return None


def _boolean(value: Any) -> str | None:
    return None if isinstance(value, bool) else "must be a boolean"


def _mapping(value: Any) -> str | None:
    return None if isinstance(value, dict) else "must be a dictionary"


def _log_level(value: Any) -> str | None:
    if str(value).upper() in {level.value for level in LogLevel}:
        return None
    return f"unknown log level: {value}"


# (section, key) -> check returning an error message, or None when valid
_FIELD_RULES: dict[tuple[str, str], Callable[[Any], str | None]] = {
    ("templates", "max_partial_substitutions"): _positive_int,
    ("templates", "max_each_iterations"): _positive_int,
    ("templates", "max_conditional_iterations"): _positive_int,
    ("templates", "strict"): _boolean,
    ("build", "site"): _mapping,
    ("logging", "level"): _log_level,
}


def _coerce_enum(enum_type: type[Enum], value: Any) -> Enum:
    """Enum member by value, accepting any letter case."""
    if isinstance(value, enum_type):
        return value
    for candidate in (value, str(value).upper(), str(value).lower()):
        try:
            return enum_type(candidate)
        except ValueError:
            continue
    raise ValueError(f"{value!r} is not a valid {enum_type.__name__}")


def _build(cls: type, data: dict[str, Any]) -> Any:
    """Instantiate a config dataclass from a dict, recursing into nested sections.

    Keys absent from ``data`` keep their dataclass defaults; unknown keys
    are ignored.
    """
    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        field_type = hints[f.name]
        if is_dataclass(field_type) and isinstance(value, dict):
            value = _build(field_type, value)
        elif typing.get_origin(field_type) is None and isinstance(field_type, type) and issubclass(field_type, Enum):
            value = _coerce_enum(field_type, value)
        kwargs[f.name] = value
    return cls(**kwargs)


class ConfigLoader:
    """Load and validate Quire configuration."""

    def __init__(self) -> None:
        """Initialize config loader."""
        self._config: QuireConfig | None = None
        self._config_path: Path | None = None
        self._change_callbacks: list[Callable[[QuireConfig], None]] = []
        self._logger = get_logger("config")

    def load(self, path: str | Path | None = None, use_defaults: bool = True) -> QuireConfig:
        """Load configuration from a YAML file.

        Resolution order if path not specified:
        1. QUIRE_CONFIG_PATH environment variable
        2. ./quire.yaml
        3. ~/.quire/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: If True, use default config when no file found

        Returns:
            Loaded QuireConfig instance

        Raises:
            QuireError: If file not found (when use_defaults=False) or invalid
        """
        config_path = Path(path) if path is not None else self._resolve_config_path()

        if config_path is None or not config_path.exists():
            if use_defaults:
                self._logger.info("No config file found, using default configuration")
                return self.load_defaults()
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path or CONFIG_FILENAME}",
            )

        data = resolve_env_vars_deep(self._read_yaml(config_path))
        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> QuireConfig:
        """Load default configuration without a file."""
        return self.load_from_dict({})

    def load_from_dict(self, data: dict[str, Any], config_path: Path | None = None) -> QuireConfig:
        """Load configuration from a dictionary.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file (for reload)

        Returns:
            Loaded QuireConfig instance

        Raises:
            QuireError: If configuration is invalid
        """
        validation = self.validate(data)
        for warning in validation.warnings:
            self._logger.warning(warning.message, path=warning.path)
        if not validation.valid:
            lines = [f"- {issue}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(lines),
            )

        try:
            config = _build(QuireConfig, data)
        except (TypeError, ValueError) as e:
            raise create_error("CONFIG_INVALID", detail=f"Failed to parse configuration: {e}") from e

        self._config = config
        self._config_path = config_path
        self._logger.info("Configuration loaded successfully", path=str(config_path) if config_path else None)
        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Unknown top-level keys are warnings; malformed sections and bad
        values are errors.
        """
        result = ValidationResult()
        sections = {f.name for f in fields(QuireConfig)}

        for key, section in data.items():
            if key not in sections:
                result.warn(key, f"Unknown configuration key: {key}")
            elif not isinstance(section, dict):
                result.error(key, f"{key} must be a dictionary")

        for (section_name, key), check in _FIELD_RULES.items():
            section = data.get(section_name)
            if not isinstance(section, dict) or key not in section:
                continue
            problem = check(section[key])
            if problem:
                result.error(f"{section_name}.{key}", f"{key} {problem}")

        return result

    def get(self) -> QuireConfig:
        """Get current configuration.

        Raises:
            QuireError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def reload(self) -> QuireConfig:
        """Re-read the file last loaded and notify change callbacks.

        Raises:
            QuireError: If no config path set or reload fails
        """
        if self._config_path is None:
            raise create_error("CONFIG_INVALID", detail="No config path set, cannot reload")

        config = self.load(self._config_path, use_defaults=False)
        for callback in self._change_callbacks:
            try:
                callback(config)
            except Exception:
                self._logger.exception("Config change callback failed")
        return config

    def on_change(self, callback: Callable[[QuireConfig], None]) -> None:
        """Register callback for config changes."""
        self._change_callbacks.append(callback)

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise create_error("CONFIG_INVALID", detail=f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise create_error("CONFIG_INVALID", detail=f"Cannot read config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise create_error("CONFIG_INVALID", detail="Configuration file must contain a mapping")
        return data

    def _resolve_config_path(self) -> Path | None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)
        for candidate in (Path(CONFIG_FILENAME), Path.home() / ".quire" / "config.yaml"):
            if candidate.exists():
                return candidate
        return None


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton."""
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> QuireConfig:
    """Convenience function to load config."""
    return get_config_loader().load(path)
