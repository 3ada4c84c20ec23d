"""Environment variable overrides for the translator configuration.

Environment variables follow the pattern ``TR_{PATH_TO_PROPERTY}``:

- ``TR_`` is the prefix
- path components are joined with underscores
- everything is UPPERCASE

Examples:
    TR_SYSTEM_LOG_LEVEL=DEBUG
    TR_ORCHESTRATOR_CLOUD_DEBOUNCE_MS=750
    TR_PROVIDERS_TRANSLATION_API_KEY=sk-123
    TR_HISTORY_REQUIRE_IDENTITY=true
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "TR"

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


class EnvConfigError(Exception):
    """Raised when an environment variable cannot be applied to the configuration."""


def parse_env_value(value: str, existing_value: Any) -> Any:
    """Parse an environment string into the type of the value it replaces.

    Examples:
        >>> parse_env_value("on", False)
        True
        >>> parse_env_value("500", 200)
        500
        >>> parse_env_value("0.25", 1.0)
        0.25
        >>> parse_env_value("alloy", "coral")
        'alloy'
    """
    if value == "" or value.lower() in ("null", "none"):
        return None

    target_type = type(existing_value) if existing_value is not None else str

    if target_type is bool:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise EnvConfigError(
            f"Cannot parse '{value}' as boolean. "
            f"Valid values: true/false, yes/no, 1/0, on/off (case-insensitive)"
        )

    if target_type is int:
        try:
            return int(value)
        except ValueError as exc:
            raise EnvConfigError(f"Cannot parse '{value}' as integer") from exc

    if target_type is float:
        try:
            return float(value)
        except ValueError as exc:
            raise EnvConfigError(f"Cannot parse '{value}' as float") from exc

    if target_type in (dict, list):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise EnvConfigError(f"Cannot parse '{value}' as JSON {target_type.__name__}") from exc
        if not isinstance(parsed, target_type):
            raise EnvConfigError(f"Expected JSON {target_type.__name__}, got {type(parsed).__name__}")
        return parsed

    return value


def env_var_name(path: List[str], prefix: str = ENV_PREFIX) -> str:
    """Build the environment variable name for a config path.

    Examples:
        >>> env_var_name(["playback", "sample_rate_hz"])
        'TR_PLAYBACK_SAMPLE_RATE_HZ'
    """
    return "_".join(part.upper() for part in [prefix, *path])


def apply_env_overrides(
    config_dict: Mapping[str, Any],
    prefix: str = ENV_PREFIX,
    path: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Recursively apply ``TR_*`` overrides to a config dict.

    Dicts are always walked so single nested values can be set; lists are
    skipped. ``environ`` defaults to ``os.environ``.
    """
    path = path or []
    environ = os.environ if environ is None else environ
    result: Dict[str, Any] = dict(config_dict)

    for key, value in result.items():
        current_path = path + [str(key)]

        if isinstance(value, list):
            continue

        if isinstance(value, dict):
            result[key] = apply_env_overrides(value, prefix, current_path, environ)
            continue

        name = env_var_name(current_path, prefix)
        raw = environ.get(name)
        if raw is None:
            continue

        try:
            result[key] = parse_env_value(raw, value)
        except EnvConfigError as exc:
            raise EnvConfigError(f"Failed to parse environment variable {name}: {exc}") from exc
        logger.info(
            "config_override_from_env var=%s value_type=%s path=%s",
            name,
            type(result[key]).__name__,
            ".".join(current_path),
        )

    return result


__all__ = ["ENV_PREFIX", "EnvConfigError", "apply_env_overrides", "env_var_name", "parse_env_value"]
