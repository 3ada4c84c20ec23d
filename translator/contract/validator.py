from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..errors import MalformedResponse
from ..models import TranslationResult, TtsConfig, UiSuggestions
from ..utils.dict_utils import first_present, snake_to_camel

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("detected_language", "source_language", "translation", "tts")

# Outermost brace-delimited span: first "{" through last "}".
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")


def _get(data: Dict[str, Any], name: str) -> Any:
    return first_present(data, name, snake_to_camel(name))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


class ResponseValidator:
    """Turns raw text from the translation capability into a `TranslationResult`.

    Parsing is attempted on the whole text first; if that fails the outermost
    ``{...}`` span is parsed instead (covers markdown fences and stray prose).
    No further heuristics are attempted.
    """

    def validate(self, raw_text: Optional[str]) -> TranslationResult:
        payload = self._parse(raw_text)

        missing = [name for name in REQUIRED_FIELDS if _get(payload, name) is None]
        if missing:
            raise MalformedResponse(f"Translation response missing required fields: {', '.join(missing)}", raw_text)

        tts_raw = _get(payload, "tts")
        if not isinstance(tts_raw, dict):
            raise MalformedResponse("Translation response field 'tts' is not an object", raw_text)

        translation = _as_text(_get(payload, "translation")).strip()
        if not translation:
            raise MalformedResponse("Translation response has an empty translation", raw_text)

        suggestions_raw = _get(payload, "ui_suggestions")
        suggestions = UiSuggestions()
        if isinstance(suggestions_raw, dict):
            suggestions = UiSuggestions(
                primary_actions=_as_text_list(_get(suggestions_raw, "primary_actions")),
                microcopy=_as_text_list(_get(suggestions_raw, "microcopy")),
            )

        return TranslationResult(
            detected_language=_as_text(_get(payload, "detected_language")),
            source_language=_as_text(_get(payload, "source_language")),
            translation=translation,
            tts=TtsConfig(
                enabled=_as_bool(_get(tts_raw, "enabled")),
                voice_language_code=_as_text(_get(tts_raw, "voice_language_code")),
                speak_text=_as_text(_get(tts_raw, "speak_text")),
            ),
            source_country=_as_text(_get(payload, "source_country")),
            target_country=_as_text(_get(payload, "target_country")),
            target_language=_as_text(_get(payload, "target_language")),
            alternatives=_as_text_list(_get(payload, "alternatives")),
            notes=_as_text(_get(payload, "notes")),
            ui_suggestions=suggestions,
        )

    @staticmethod
    def _parse(raw_text: Optional[str]) -> Dict[str, Any]:
        if not raw_text or not raw_text.strip():
            raise MalformedResponse("Empty response from translation capability", raw_text)

        try:
            parsed = json.loads(raw_text)
        except json.JSONDecodeError:
            match = _OBJECT_SPAN.search(raw_text)
            if match is None:
                raise MalformedResponse("Invalid translation response format", raw_text) from None
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError as exc:
                logger.error("Unparseable translation payload (%d chars)", len(raw_text))
                raise MalformedResponse("Invalid translation response format", raw_text) from exc

        if not isinstance(parsed, dict):
            raise MalformedResponse(
                f"Translation response is a JSON {type(parsed).__name__}, expected an object", raw_text
            )
        return parsed


__all__ = ["REQUIRED_FIELDS", "ResponseValidator"]
