"""Bilingual (English / Arabic) messages for API errors."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

_LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"
SUPPORTED_LANGUAGES = ("en", "ar")
DEFAULT_LANGUAGE = "en"


@lru_cache(maxsize=len(SUPPORTED_LANGUAGES))
def _catalogue(lang: str) -> dict[str, str]:
    path = _LOCALES_DIR / lang / "messages.json"
    if not path.exists():
        logger.warning("Locale file not found: %s", path)
        return {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def translate(lang: str, key: str, **kwargs: object) -> str:
    """Return the message for *key* in *lang*, falling back to English, then the key."""
    text = _catalogue(lang).get(key) or _catalogue(DEFAULT_LANGUAGE).get(key)
    if text is None:
        return key
    try:
        return text.format(**kwargs)
    except KeyError:
        logger.warning("Missing placeholder for message %s", key)
        return text


def preferred_language(accept_language: str) -> str:
    """Pick the first supported language from an ``Accept-Language`` header.

    Matches the full tag or its primary subtag (``ar-SA`` → ``ar``).
    """
    for part in accept_language.split(","):
        tag = part.split(";")[0].strip().lower()
        for candidate in (tag, tag.split("-")[0]):
            if candidate in SUPPORTED_LANGUAGES:
                return candidate
    return DEFAULT_LANGUAGE
