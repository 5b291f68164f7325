"""Panel interface translations, shipped as YAML files in ``translations/``."""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib.resources import files
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@lru_cache(maxsize=None)
def load_translations(language: str) -> dict[str, str]:
    """Load the strings of a language, an empty mapping when unknown."""
    resource = files("kirby.panel").joinpath("translations", f"{language}.yml")
    if not resource.is_file():
        logger.debug("No panel translation for %s", language)
        return {}
    data = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
    return {str(key): str(value) for key, value in data.items()}


def t(key: str, fallback: str | None = None, language: str = DEFAULT_LANGUAGE, **replace: Any) -> str:
    """Translate key, falling back to English, then to fallback, then to the key.

    Keyword arguments fill ``{placeholders}`` in the translation.
    """
    text = load_translations(language).get(key)
    if text is None and language != DEFAULT_LANGUAGE:
        text = load_translations(DEFAULT_LANGUAGE).get(key)
    if text is None:
        text = fallback if fallback is not None else key

    for name, value in replace.items():
        text = text.replace(f"{{{name}}}", str(value))
    return text
