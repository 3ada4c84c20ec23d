from __future__ import annotations

from ..models import AUTO_DETECT, TranslationRequest

SYSTEM_INSTRUCTION = """You are a translation assistant.
Translate the user input naturally for the target country and language.
Detect the source language when the source language is 'auto'.
Respond with a single JSON object and nothing else (no markdown, no prose) with these keys:
  detected_language (string), source_country (string), source_language (string),
  target_country (string), target_language (string), translation (string),
  alternatives (array of strings), notes (string),
  ui_suggestions (object: primary_actions array of strings, microcopy array of strings),
  tts (object: enabled boolean, voice_language_code string, speak_text string).
detected_language, source_language, translation and tts are required."""


def build_translation_prompt(request: TranslationRequest) -> str:
    escaped = request.source_text.replace('"', '\\"')
    source_language = request.source_language or AUTO_DETECT
    return (
        f'Input data to translate: "{escaped}"\n'
        f"Source settings: Country: {request.source_country or 'Unknown'}, Language: {source_language}\n"
        f"Target settings: Country: {request.target_country}, Language: {request.target_language}\n"
        "\n"
        "Translate accurately and return a valid JSON object only."
    )
