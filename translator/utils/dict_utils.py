from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def deep_merge(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Recursively merge two mappings.
    - Dicts are merged
    - All other values (including lists) are replaced
    - If override is None, returns a copy of base
    """
    result: Dict[str, Any] = dict(base)

    if override is None:
        return result

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in ``data`` (None when absent).

    Used to read payload fields that may arrive as either ``snake_case`` or
    ``camelCase``.

    Examples:
        >>> first_present({"detectedLanguage": "en"}, "detected_language", "detectedLanguage")
        'en'
        >>> first_present({}, "missing") is None
        True
    """
    for key in keys:
        if key in data:
            return data[key]
    return None


def snake_to_camel(name: str) -> str:
    """Convert ``snake_case`` to ``camelCase``.

    Examples:
        >>> snake_to_camel("voice_language_code")
        'voiceLanguageCode'
        >>> snake_to_camel("translation")
        'translation'
    """
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)
