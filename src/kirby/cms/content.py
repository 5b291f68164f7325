"""Content fields of a model, as read from its content file."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_TRUE = frozenset({"1", "true", "yes", "on"})


class Field:
    """A single content value with a few conversion helpers.

    Missing fields are represented by a Field whose value is None, so chains
    like ``file.alt.or_("fallback")`` never fail.
    """

    def __init__(self, parent: Any, key: str, value: Any = None) -> None:
        self.parent = parent
        self.key = key
        self.value = value

    def __repr__(self) -> str:
        return f"Field({self.key!r}, {self.value!r})"

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)

    def __bool__(self) -> bool:
        return self.is_not_empty()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Field):
            return self.value == other.value
        return self.value == other

    def __hash__(self) -> int:
        return hash((self.key, self.value))

    def is_empty(self) -> bool:
        if self.value is None:
            return True
        if isinstance(self.value, str):
            return self.value.strip() == ""
        return not self.value

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def or_(self, fallback: Any) -> Field:
        """Return this field, or a field holding fallback when empty."""
        if self.is_not_empty():
            return self
        if isinstance(fallback, Field):
            return fallback
        return Field(self.parent, self.key, fallback)

    def to_string(self) -> str:
        return str(self)

    def to_bool(self, default: bool = False) -> bool:
        if self.is_empty():
            return default
        return str(self.value).strip().lower() in _TRUE

    def to_int(self, default: int = 0) -> int:
        try:
            return int(str(self.value).strip())
        except (TypeError, ValueError):
            return default

    def to_float(self, default: float = 0.0) -> float:
        try:
            return float(str(self.value).strip())
        except (TypeError, ValueError):
            return default

    def split(self, separator: str = ",") -> list[str]:
        if self.is_empty():
            return []
        return [part.strip() for part in str(self.value).split(separator) if part.strip()]

    def yaml(self) -> Any:
        """Parse the value as YAML (lists and mappings are stored that way)."""
        if self.is_empty():
            return []
        try:
            return yaml.safe_load(str(self.value))
        except yaml.YAMLError as exc:
            logger.warning("Field %r is not valid YAML: %s", self.key, exc)
            return []


class Content:
    """Field store with case-insensitive keys."""

    def __init__(self, data: dict[str, Any] | None = None, parent: Any = None) -> None:
        self.parent = parent
        self._data: dict[str, Any] = {}
        self.update(data or {})

    def __repr__(self) -> str:
        return f"Content({self._data!r})"

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def data(self) -> dict[str, Any]:
        return dict(self._data)

    def keys(self) -> list[str]:
        return list(self._data)

    def fields(self) -> dict[str, Field]:
        return {key: self.get(key) for key in self._data}

    def get(self, key: str) -> Field:
        key = key.lower()
        return Field(self.parent, key, self._data.get(key))

    def has(self, key: str) -> bool:
        return key in self

    def update(self, data: dict[str, Any] | None = None, overwrite: bool = False) -> Content:
        """Merge data into the store; None values remove keys."""
        if overwrite:
            self._data = {}

        for key, value in (data or {}).items():
            key = str(key).lower()
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value
        return self

    def not_(self, *keys: str) -> Content:
        """Copy without the given keys."""
        excluded = {key.lower() for key in keys}
        return Content({k: v for k, v in self._data.items() if k not in excluded}, self.parent)

    def to_array(self) -> dict[str, Any]:
        return dict(self._data)
