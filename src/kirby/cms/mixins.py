"""Behaviour shared between models: custom methods, sibling navigation and folder files."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from kirby.cms.collection import Collection
from kirby.cms.model import scan_files
from kirby.core.exceptions import NotFoundError

if TYPE_CHECKING:
    from kirby.cms.collection import Files
    from kirby.cms.file import File


class HasMethods:
    """Registry of plugin methods callable on instances.

    Each method receives the instance as first argument.
    """

    methods: ClassVar[dict[str, Callable[..., Any]]] = {}

    @classmethod
    def register_method(cls, name: str, method: Callable[..., Any]) -> None:
        cls.methods[name] = method

    @classmethod
    def has_method(cls, name: str) -> bool:
        return name in cls.methods

    def call_method(self, name: str, args: tuple[Any, ...] = (), kwargs: dict[str, Any] | None = None) -> Any:
        if name not in self.methods:
            msg = f"The method {name} does not exist"
            raise NotFoundError(msg)
        return self.methods[name](self, *args, **(kwargs or {}))


class HasSiblings:
    """Navigation inside the collection returned by ``siblings_collection``."""

    def siblings_collection(self) -> Collection[Any]:
        raise NotImplementedError

    def siblings(self, include_self: bool = True) -> Collection[Any]:
        siblings = self.siblings_collection()
        if include_self:
            return siblings
        return siblings.not_(self)

    def index_of(self) -> int:
        return self.siblings_collection().index_of(self)

    def next(self) -> Any:
        return self.siblings_collection().next_of(self)

    def prev(self) -> Any:
        return self.siblings_collection().prev_of(self)

    def has_next(self) -> bool:
        return self.next() is not None

    def has_prev(self) -> bool:
        return self.prev() is not None

    def is_first(self) -> bool:
        first = self.siblings_collection().first()
        return first is not None and first.id == self.id  # type: ignore[attr-defined]

    def is_last(self) -> bool:
        last = self.siblings_collection().last()
        return last is not None and last.id == self.id  # type: ignore[attr-defined]

    def is_nth(self, n: int) -> bool:
        return self.index_of() == n


class HasFiles:
    """Files stored in the model's folder."""

    # Names never treated as managed files
    ignored_files: ClassVar[tuple[str, ...]] = ()

    _files: Files | None = None

    def files(self) -> Files:
        if self._files is None:
            self._files = scan_files(self, self.root, exclude=self.ignored_files)  # type: ignore[arg-type, attr-defined]
        return self._files

    def file(self, filename: str) -> File | None:
        return self.files().find(filename)

    def images(self) -> Files:
        return self.files().images()

    def has_files(self) -> bool:
        return bool(self.files())

    def flush_files(self) -> None:
        """Forget the cached collection so the folder is scanned again."""
        self._files = None
