"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for liveresolve:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.liveresolve/`` on macOS and Windows. See :func:`get_config_dir`.
* **Global config** -- A single :class:`~liveresolve.models.GlobalConfig`
  JSON file storing defaults (output format, log level, resolver lists).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from liveresolve.exceptions import ConfigError
from liveresolve.models import GlobalConfig

_APP_NAME = "liveresolve"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "liveresolve.json"

ENV_FORMAT = "LIVERESOLVE_FORMAT"
ENV_LOG_LEVEL = "LIVERESOLVE_LOG_LEVEL"

_VALID_FORMATS = ("auto", "json", "plain", "rich")
_VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

SETTABLE_KEYS = ("output.format", "log_level", "discover_resolvers")
"""Dotted keys accepted by :func:`set_config_value`."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/liveresolve/`` (default
    ``~/.config/liveresolve/``). On macOS/Windows: ``~/.liveresolve/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~liveresolve.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    Args:
        config: The configuration to update. Not modified.
        key: One of :data:`SETTABLE_KEYS`.
        value: The raw string value from the command line.

    Returns:
        A validated, updated :class:`~liveresolve.models.GlobalConfig`.

    Raises:
        ConfigError: For an unknown key or an invalid value.
    """
    data = config.model_dump(mode="json")
    if key == "output.format":
        if value.lower() not in _VALID_FORMATS:
            raise ConfigError(
                f"Invalid output format '{value}'. Expected one of: {', '.join(_VALID_FORMATS)}"
            )
        data["output"]["format"] = value.lower()
    elif key == "log_level":
        if value.upper() not in _VALID_LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level '{value}'. Expected one of: {', '.join(_VALID_LOG_LEVELS)}"
            )
        data["log_level"] = value.upper()
    elif key == "discover_resolvers":
        lowered = value.lower()
        if lowered not in ("true", "false"):
            raise ConfigError(f"Invalid boolean '{value}'. Expected true or false")
        data["discover_resolvers"] = lowered == "true"
    else:
        raise ConfigError(
            f"Unknown config key '{key}'. Settable keys: {', '.join(SETTABLE_KEYS)}"
        )
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for '{key}': {exc}") from exc


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local overrides from ``./liveresolve.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_log_level: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_log_level``)
        2. Environment variables (``LIVERESOLVE_FORMAT``, ``LIVERESOLVE_LOG_LEVEL``)
        3. Project config (``./liveresolve.json``)
        4. User config (``~/.config/liveresolve/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~liveresolve.models.GlobalConfig`.

    Raises:
        ConfigError: If any config file is invalid.
    """
    # 5 + 4. Defaults and user config
    global_cfg = load_global_config()

    # 3. Project-local config
    project = load_project_config()
    if project is not None:
        merged = global_cfg.model_dump(mode="json")
        for key, value in project.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        try:
            global_cfg = GlobalConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment variables
    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        global_cfg.output.format = env_format.lower()
    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        global_cfg.log_level = env_level.upper()

    # 1. CLI flags
    if cli_format is not None:
        global_cfg.output.format = cli_format
    if cli_log_level is not None:
        global_cfg.log_level = cli_log_level.upper()

    return global_cfg
