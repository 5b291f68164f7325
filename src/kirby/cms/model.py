"""Base classes shared by the site, pages, users and files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kirby.cms.app import App
from kirby.cms.content import Content, Field
from kirby.data import txt

if TYPE_CHECKING:
    from kirby.cms.collection import Files
    from kirby.cms.site import Site

logger = logging.getLogger(__name__)


class Model:
    """Anything that belongs to an App."""

    def __init__(self, kirby: App | None = None) -> None:
        self._kirby = kirby

    @property
    def kirby(self) -> App:
        if self._kirby is None:
            self._kirby = App.instance()
        return self._kirby

    @property
    def site(self) -> Site:
        return self.kirby.site()


class ModelWithContent(Model):
    """A model with a content file next to it.

    Unknown attributes resolve to content fields, so ``page.title`` returns
    the ``title`` Field (empty when the content file has none).
    """

    def __init__(self, content: dict[str, Any] | None = None, kirby: App | None = None) -> None:
        super().__init__(kirby)
        self._content: Content | None = Content(content, self) if content is not None else None

    def __getattr__(self, name: str) -> Field:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.content().get(name)

    @property
    def id(self) -> str:
        raise NotImplementedError

    @property
    def root(self) -> Path | None:
        raise NotImplementedError

    def content(self, language_code: str | None = None) -> Content:
        if language_code is not None:
            return Content(self.read_content(language_code), self)

        if self._content is None:
            self._content = Content(self.read_content(), self)
        return self._content

    def content_file(self, language_code: str | None = None) -> Path:
        """Absolute path of the content file, optionally for a language."""
        parts = [self.content_file_name()]
        if language_code:
            parts.append(language_code)
        parts.append(self.content_file_extension())
        return self.content_file_directory() / ".".join(parts)

    def content_file_directory(self) -> Path:
        root = self.root
        if root is None:
            msg = f"{type(self).__name__} has no root"
            raise ValueError(msg)
        return root

    def content_file_name(self) -> str:
        raise NotImplementedError

    def content_file_extension(self) -> str:
        return str(self.kirby.option("content.extension", "txt"))

    def content_file_data(self, data: dict[str, Any], language_code: str | None = None) -> dict[str, Any]:
        """Hook to adjust data before it is written to the content file."""
        return data

    def read_content(self, language_code: str | None = None) -> dict[str, Any]:
        return txt.read(self.content_file(language_code))

    def write_content(self, data: dict[str, Any], language_code: str | None = None) -> None:
        path = self.content_file(language_code)
        txt.write(path, self.content_file_data(data, language_code))
        logger.debug("Saved content of %s to %s", self.id, path)

    def files(self) -> Files:
        raise NotImplementedError

    def to_array(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content().to_array(),
        }


def scan_files(parent: ModelWithContent, root: Path, exclude: tuple[str, ...] = ()) -> Files:
    """Build the Files collection for a folder.

    Content files (``*.txt``), hidden files and names in ``exclude`` are skipped.
    """
    from kirby.cms.collection import Files
    from kirby.cms.file import File

    extension = f".{parent.content_file_extension()}"
    files = Files(parent=parent)
    if not root.is_dir():
        return files

    for entry in sorted(root.iterdir()):
        if not entry.is_file() or entry.name.startswith("."):
            continue
        if entry.suffix == extension or entry.name in exclude:
            continue
        # The template doubles as model name for registered File subclasses
        template = txt.read(entry.with_name(entry.name + extension)).get("template") or None
        props = {"filename": entry.name, "parent": parent, "kirby": parent.kirby, "template": template}
        if template:
            props["model"] = template
        files.append(File.factory(props))

    return files
