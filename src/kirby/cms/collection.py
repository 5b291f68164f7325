"""Ordered, id-keyed collections of models."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from kirby.cms.content import Field

if TYPE_CHECKING:
    from kirby.cms.file import File
    from kirby.cms.page import Page

T = TypeVar("T")


def _item_value(item: Any, field: str) -> Any:
    """Read a comparable value from an item attribute, method or content field."""
    value = getattr(item, field, None)
    if callable(value):
        value = value()
    if isinstance(value, Field):
        value = value.value
    return value


class Collection(Generic[T]):
    """Insertion-ordered mapping of ids to models."""

    def __init__(self, items: Iterable[T] = (), parent: Any = None) -> None:
        self.parent = parent
        self._items: dict[str, T] = {}
        for item in items:
            self.append(item)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.keys()!r})"

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._items
        return self._key(item) in self._items  # type: ignore[arg-type]

    def __getitem__(self, key: str | int) -> T:
        if isinstance(key, int):
            return self.values()[key]
        return self._items[key]

    def _key(self, item: T) -> str:
        return item.id  # type: ignore[attr-defined]

    def _copy(self, items: Iterable[T]) -> Collection[T]:
        return type(self)(items, parent=self.parent)

    def count(self) -> int:
        return len(self._items)

    def keys(self) -> list[str]:
        return list(self._items)

    def values(self) -> list[T]:
        return list(self._items.values())

    def first(self) -> T | None:
        return next(iter(self._items.values()), None)

    def last(self) -> T | None:
        return self.values()[-1] if self._items else None

    def nth(self, index: int) -> T | None:
        values = self.values()
        if 0 <= index < len(values):
            return values[index]
        return None

    def get(self, key: str, default: T | None = None) -> T | None:
        return self._items.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._items

    def find(self, key: str) -> T | None:
        return self._items.get(key)

    def index_of(self, item: T | str) -> int:
        """Position of an item or key, -1 when absent."""
        key = item if isinstance(item, str) else self._key(item)
        try:
            return self.keys().index(key)
        except ValueError:
            return -1

    def append(self, item: T, key: str | None = None) -> Collection[T]:
        self._items[key if key is not None else self._key(item)] = item
        return self

    def prepend(self, item: T, key: str | None = None) -> Collection[T]:
        key = key if key is not None else self._key(item)
        items = {key: item}
        items.update((k, v) for k, v in self._items.items() if k != key)
        self._items = items
        return self

    def not_(self, *items: T | str) -> Collection[T]:
        """Copy without the given items or keys."""
        excluded = {item if isinstance(item, str) else self._key(item) for item in items}
        return self._copy(v for k, v in self._items.items() if k not in excluded)

    def filter(self, predicate: Callable[[T], bool]) -> Collection[T]:
        return self._copy(item for item in self._items.values() if predicate(item))

    def filter_by(self, field: str, value: Any) -> Collection[T]:
        return self.filter(lambda item: _item_value(item, field) == value)

    def sort_by(self, field: str, reverse: bool = False) -> Collection[T]:
        def sort_key(item: T) -> tuple[bool, Any]:
            value = _item_value(item, field)
            return (value is None, value if value is not None else "")

        return self._copy(sorted(self._items.values(), key=sort_key, reverse=reverse))

    def next_of(self, item: T) -> T | None:
        return self.nth(self.index_of(item) + 1) if item in self else None

    def prev_of(self, item: T) -> T | None:
        index = self.index_of(item)
        return self.nth(index - 1) if index > 0 else None

    def to_array(self, mapper: Callable[[T], Any] | None = None) -> dict[str, Any]:
        if mapper is None:
            return {key: item.to_array() for key, item in self._items.items()}  # type: ignore[attr-defined]
        return {key: mapper(item) for key, item in self._items.items()}


class Files(Collection["File"]):
    """Files of one parent, keyed by file id."""

    def find(self, key: str) -> File | None:
        """Find by full id or by filename relative to the parent."""
        if key in self._items:
            return self._items[key]

        parent_id = getattr(self.parent, "id", None)
        if parent_id and f"{parent_id}/{key}" in self._items:
            return self._items[f"{parent_id}/{key}"]

        return next((file for file in self._items.values() if file.filename == key), None)

    def images(self) -> Files:
        return self.filter_by("type", "image")  # type: ignore[return-value]

    def documents(self) -> Files:
        return self.filter_by("type", "document")  # type: ignore[return-value]


class Pages(Collection["Page"]):
    """Pages keyed by their slash-separated id."""

    def listed(self) -> Pages:
        return self.filter(lambda page: page.num is not None)  # type: ignore[return-value]

    def unlisted(self) -> Pages:
        return self.filter(lambda page: page.num is None)  # type: ignore[return-value]
