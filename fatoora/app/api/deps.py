from __future__ import annotations

from fastapi import Request

from fatoora.app.core.i18n import DEFAULT_LANGUAGE


def get_language(request: Request) -> str:
    """Language resolved by ``LanguageMiddleware`` (English when absent)."""
    return getattr(request.state, "language", DEFAULT_LANGUAGE)
