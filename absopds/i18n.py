"""Localized strings loaded from ``<languages_dir>/<lang>.json``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional

from absopds import logger


def _primary_language(hint: Optional[str]) -> Optional[str]:
    """``"de-DE,de;q=0.9,en;q=0.8"`` -> ``"de"``"""
    if not hint:
        return None
    first = hint.split(",", 1)[0].split(";", 1)[0].strip()
    code = first.split("-", 1)[0].split("_", 1)[0].strip().lower()
    return code or None


class Localizer:
    def __init__(self, languages: Dict[str, Dict[str, str]], fallback_language: str = "en"):
        self._languages = {code.lower(): strings for code, strings in languages.items()}
        self.fallback_language = fallback_language.lower()

    @classmethod
    def from_directory(cls, languages_dir: Path, fallback_language: str = "en") -> "Localizer":
        languages: Dict[str, Dict[str, str]] = {}
        if not languages_dir.is_dir():
            logger.warning(f"Languages directory not found: {languages_dir}; using message keys")
            return cls(languages, fallback_language)
        for path in sorted(languages_dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning(f"Skipping language file {path.name}: {exc}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Skipping language file {path.name}: expected a JSON object")
                continue
            languages[path.stem.lower()] = {str(k): v for k, v in data.items() if isinstance(v, str)}
        return cls(languages, fallback_language)

    @property
    def languages(self) -> list[str]:
        return sorted(self._languages)

    def localize(self, key: str, language_hint: Optional[str] = None) -> str:
        """Look up ``key`` in the hinted language, then the fallback, else return the key."""
        requested = _primary_language(language_hint)
        language = requested if requested in self._languages else self.fallback_language

        value = self._languages.get(language, {}).get(key)
        if value is not None:
            return value
        if language != self.fallback_language:
            value = self._languages.get(self.fallback_language, {}).get(key)
            if value is not None:
                return value
        return key
