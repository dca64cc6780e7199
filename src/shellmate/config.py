"""Resolve shellmate settings from ``~/.shellmate/config.json`` and the environment."""

import json
import logging
import os
import stat
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from shellmate.models import DEFAULT_OLLAMA_HOST, ShellmateConfig

log = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".shellmate"
CONFIG_FILE = CONFIG_DIR / "config.json"

# API key variable for each known provider; ollama runs locally without one.
PROVIDER_API_KEYS: dict[str, str | None] = {
    "gemini": "GEMINI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "xai": "XAI_API_KEY",
    "ollama": None,
}

# Environment variable -> ShellmateConfig field it overrides.
ENV_OVERRIDES = {
    "SHELLMATE_MODEL": "model",
    "SHELLMATE_CONTEXT_BYTES": "context_bytes",
    "SHELLMATE_TIMEOUT": "request_timeout",
    "SHELLMATE_EXPLAIN": "show_explanation",
}


def load_config() -> ShellmateConfig:
    """Load the config file and apply environment overrides on top of it.

    Values that fail validation are dropped with a warning, field by field, so
    a single bad setting never discards the rest.  An invalid environment
    value leaves the file's value (or the default) in place.

    Returns:
        The resolved ``ShellmateConfig`` instance.
    """
    file_values = _valid_fields(_read_config_file(), str(CONFIG_FILE))
    env_values = _valid_fields(_env_overrides(), "environment")
    config = ShellmateConfig.model_validate({**file_values, **env_values})
    _apply_provider_env(config)
    return config


def _read_config_file() -> dict[str, Any]:
    _ensure_config_file_permissions()
    if not CONFIG_FILE.exists():
        return {}

    try:
        with open(CONFIG_FILE) as f:
            loaded = json.load(f)
    except json.JSONDecodeError as exc:
        log.warning("invalid config JSON in %s (%s); falling back to defaults", CONFIG_FILE, exc)
        return {}
    if not isinstance(loaded, dict):
        log.warning("config in %s is not a JSON object; falling back to defaults", CONFIG_FILE)
        return {}
    log.debug("loaded config from %s", CONFIG_FILE)
    return loaded


def _env_overrides() -> dict[str, str]:
    return {
        field: value
        for name, field in ENV_OVERRIDES.items()
        if (value := os.environ.get(name))
    }


def _valid_fields(values: dict[str, Any], source: str) -> dict[str, Any]:
    """Return *values* without the fields that fail validation."""
    try:
        ShellmateConfig.model_validate(values)
    except ValidationError as e:
        invalid = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
        log.warning("ignoring invalid %s from %s", ", ".join(sorted(invalid)), source)
        return {key: value for key, value in values.items() if key not in invalid}
    return values


def _apply_provider_env(config: ShellmateConfig) -> None:
    """Fill in the provider's API key and, for ollama, its host from the environment."""
    provider = config.provider
    if provider not in PROVIDER_API_KEYS:
        return
    env_key = PROVIDER_API_KEYS[provider]
    if env_key and (api_key := os.environ.get(env_key)):
        config.api_key = api_key
    if provider == "ollama":
        if ollama_host := os.environ.get("OLLAMA_HOST"):
            config.ollama_host = ollama_host
        elif not config.ollama_host:
            config.ollama_host = DEFAULT_OLLAMA_HOST


def _ensure_config_file_permissions() -> None:
    """Ensure the config file is not readable/writable by group or others."""
    if not CONFIG_FILE.exists():
        return

    current_mode = stat.S_IMODE(CONFIG_FILE.stat().st_mode)
    if current_mode & 0o077:
        CONFIG_FILE.chmod(0o600)
        log.warning(
            "updated config file permissions for %s from %o to 600",
            CONFIG_FILE,
            current_mode,
        )
