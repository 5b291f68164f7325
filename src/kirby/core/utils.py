"""String helpers: slugs, dotted object queries and string templates."""

from __future__ import annotations

import ast
import re
from collections.abc import Mapping
from typing import Any
from unicodedata import normalize

from kirby.core.exceptions import InvalidArgumentError

TEMPLATE_PATTERN = re.compile(r"\{\{\s*(.*?)\s*\}\}")
_IDENTIFIER = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)(?:\((.*)\))?$", re.DOTALL)
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_LITERALS = {"true": True, "false": False, "null": None}


def slugify(text: str, max_len: int = 60) -> str:
    """Convert text to a safe URL-friendly slug.

    Args:
        text: Input text to slugify
        max_len: Maximum length of output slug (default 60)

    Returns:
        Safe slug string suitable for filenames and URLs

    Examples:
        >>> slugify("Hello World")
        'hello-world'
        >>> slugify("Café")
        'cafe'

    """
    # Normalize unicode (NFKD) and convert to ASCII
    normalized = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()

    # Replace non-alphanumeric characters with hyphens
    slug = re.sub(r"[^a-z0-9]+", "-", normalized).strip("-")

    if not slug:
        return "untitled"

    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")

    return slug


def snake_case(name: str) -> str:
    """Convert a camelCase name to snake_case ('mediaUrl' -> 'media_url')."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _split_outside(text: str, separator: str) -> list[str]:
    """Split text on separator, ignoring separators inside quotes or parentheses."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []

    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    if quote or depth != 0:
        msg = f"Unbalanced quotes or parentheses in query: {text!r}"
        raise InvalidArgumentError(msg)

    parts.append("".join(current))
    return parts


def _parse_argument(raw: str) -> Any:
    raw = raw.strip()
    if raw in _LITERALS:
        return _LITERALS[raw]
    try:
        return ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return raw


def _parse_segment(segment: str) -> tuple[str, list[Any] | None]:
    match = _IDENTIFIER.match(segment.strip())
    if not match:
        msg = f"Invalid query segment: {segment!r}"
        raise InvalidArgumentError(msg)

    name, raw_args = match.groups()
    if raw_args is None:
        return name, None
    if not raw_args.strip():
        return name, []
    return name, [_parse_argument(arg) for arg in _split_outside(raw_args, ",")]


def _resolve_name(obj: Any, name: str) -> str:
    """Prefer a real class attribute, falling back to its snake_case spelling."""
    if hasattr(type(obj), name):
        return name
    snake = snake_case(name)
    if snake != name and hasattr(type(obj), snake):
        return snake
    return name


def _resolve_segment(obj: Any, name: str, args: list[Any] | None) -> Any:
    if isinstance(obj, Mapping):
        value = obj.get(name)
    else:
        value = getattr(obj, _resolve_name(obj, name), None)

    if callable(value) and not isinstance(value, type):
        return value(*(args or []))

    return value


def query(expression: str | None, data: Mapping[str, Any]) -> Any:
    """Resolve a dotted query like ``page.files.first`` against ``data``.

    The first segment is looked up in ``data``; every following segment is an
    attribute, mapping key or method call (``files.find("a.jpg")``) on the
    previous result. camelCase names fall back to their snake_case attribute.
    Resolution stops with ``None`` as soon as a segment yields ``None``.
    """
    if expression is None or not expression.strip():
        return None

    segments = _split_outside(expression.strip(), ".")
    name, args = _parse_segment(segments[0])
    result = _resolve_segment(data, name, args)

    for segment in segments[1:]:
        if result is None:
            return None
        name, args = _parse_segment(segment)
        result = _resolve_segment(result, name, args)

    return result


def template(text: str, data: Mapping[str, Any], fallback: str = "") -> str:
    """Replace ``{{ query }}`` placeholders in text with query results."""

    def replacement(match: re.Match[str]) -> str:
        try:
            value = query(match.group(1), data)
        except InvalidArgumentError:
            return fallback
        if value is None:
            return fallback
        return str(value)

    return TEMPLATE_PATTERN.sub(replacement, text)
