"""Codec for content files.

A content file is a list of ``Key: value`` fields separated by ``----`` lines::

    Title: A photo

    ----

    Tags:

    - blue
    - sky

Lists and mappings are stored as YAML blocks. Lines inside a value that start
with ``----`` are escaped as ``\\----``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SEPARATOR = "\n\n----\n\n"
_FIELD_SPLIT = re.compile(r"\n----\s*\n*")
_ESCAPE = re.compile(r"(^|\n)----")
_UNESCAPE = re.compile(r"(^|\n)\\----")


def _escape(value: str) -> str:
    return _ESCAPE.sub(r"\1\\----", value)


def _unescape(value: str) -> str:
    return _UNESCAPE.sub(r"\1----", value)


def encode_value(value: Any) -> str:
    """Turn a field value into its textual form."""
    if isinstance(value, (list, tuple, dict)):
        value = yaml.safe_dump(
            list(value) if isinstance(value, tuple) else value,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    elif isinstance(value, bool):
        value = "true" if value else "false"
    else:
        value = str(value)

    return _escape(value.strip())


def encode(data: dict[str, Any]) -> str:
    """Encode a field mapping into content-file text.

    ``None`` values are skipped. Keys are written with an upper-case first
    letter, multi-line values start on a new paragraph.
    """
    fields = []
    for key, value in data.items():
        key = str(key).strip()
        if not key or value is None:
            continue

        encoded = encode_value(value)
        label = key[0].upper() + key[1:]
        if "\n" in encoded:
            fields.append(f"{label}:\n\n{encoded}")
        else:
            fields.append(f"{label}: {encoded}")

    return SEPARATOR.join(fields) + "\n" if fields else ""


def decode(text: str) -> dict[str, str]:
    """Decode content-file text into a mapping of lower-cased keys to raw values."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    # Strip a leading BOM
    text = text.lstrip("\ufeff")

    data: dict[str, str] = {}
    for field in _FIELD_SPLIT.split(text):
        position = field.find(":")
        if position == -1:
            continue

        key = field[:position].strip().lower()
        if not key:
            continue

        data[key] = _unescape(field[position + 1 :].strip())

    return data


def read(path: Path) -> dict[str, str]:
    """Read and decode a content file, returning an empty mapping when missing."""
    if not path.is_file():
        return {}
    return decode(path.read_text(encoding="utf-8"))


def write(path: Path, data: dict[str, Any]) -> None:
    """Encode data and write it to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode(data), encoding="utf-8")
    logger.debug("Wrote content file %s", path)
