from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kirby.cms.collection import Pages
from kirby.cms.mixins import HasFiles
from kirby.cms.model import ModelWithContent

if TYPE_CHECKING:
    from kirby.cms.app import App

# "1_projects" -> num 1, slug "projects"
FOLDER_PATTERN = re.compile(r"^(?:(\d+)_)?(.+)$")


class Page(HasFiles, ModelWithContent):
    """A content folder. Its template is the name of its content file."""

    def __init__(
        self,
        slug: str,
        parent: Page | None = None,
        num: int | None = None,
        root: Path | None = None,
        template: str | None = None,
        content: dict[str, Any] | None = None,
        kirby: App | None = None,
    ) -> None:
        super().__init__(content, kirby)
        self.slug = slug
        self.parent = parent
        self.num = num
        self._root = root
        self._template = template
        self._children: Pages | None = None

    def __repr__(self) -> str:
        return f"Page({self.id!r})"

    @property
    def id(self) -> str:
        if self.parent is not None:
            return f"{self.parent.id}/{self.slug}"
        return self.slug

    @property
    def root(self) -> Path:
        if self._root is None:
            folder = f"{self.num}_{self.slug}" if self.num is not None else self.slug
            base = self.parent.root if self.parent is not None else self.kirby.root("content")
            self._root = base / folder
        return self._root

    @property
    def template(self) -> str:
        """Name of the content file, 'default' when there is none."""
        if self._template is None:
            self._template = self._detect_template() or "default"
        return self._template

    def _detect_template(self) -> str | None:
        extension = f".{self.content_file_extension()}"
        if not self.root.is_dir():
            return None
        for entry in sorted(self.root.iterdir()):
            # "photo.jpg.txt" belongs to a file, "project.txt" to the page
            if entry.is_file() and entry.suffix == extension and "." not in entry.stem:
                return entry.stem
        return None

    @property
    def url(self) -> str:
        base = self.kirby.url("index")
        if self.is_home():
            return base or "/"
        return f"{base}/{self.id}"

    @property
    def is_listed(self) -> bool:
        return self.num is not None

    def is_home(self) -> bool:
        return self.id == self.kirby.option("home", "home")

    def content_file_name(self) -> str:
        return self.template

    def media_root(self) -> Path:
        return self.kirby.root("media") / "pages" / self.id

    def media_url(self) -> str:
        return f"{self.kirby.url('media')}/pages/{self.id}"

    def panel_id(self) -> str:
        return self.id.replace("/", "+")

    def panel_path(self) -> str:
        return f"pages/{self.panel_id()}"

    def panel_url(self, relative: bool = False) -> str:
        if relative:
            return f"/{self.panel_path()}"
        return f"{self.kirby.url('panel')}/{self.panel_path()}"

    def api_url(self, relative: bool = False) -> str:
        if relative:
            return self.panel_path()
        return f"{self.kirby.url('api')}/{self.panel_path()}"

    def parents(self) -> Pages:
        """Ancestors, nearest first."""
        parents = Pages()
        page = self.parent
        while page is not None:
            parents.append(page)
            page = page.parent
        return parents

    def children(self) -> Pages:
        if self._children is None:
            self._children = scan_pages(self.root, parent=self, kirby=self.kirby)
        return self._children

    def index(self) -> list[Page]:
        pages: list[Page] = []
        for child in self.children():
            pages.append(child)
            pages.extend(child.index())
        return pages

    def to_array(self) -> dict[str, Any]:
        return {
            **super().to_array(),
            "num": self.num,
            "slug": self.slug,
            "template": self.template,
            "url": self.url,
        }


def scan_pages(root: Path, parent: Page | None, kirby: App) -> Pages:
    """Build pages from the sub folders of root (hidden folders and _drafts are skipped)."""
    pages = Pages(parent=parent)
    if not root.is_dir():
        return pages

    for entry in sorted(root.iterdir()):
        if not entry.is_dir() or entry.name.startswith((".", "_")):
            continue
        match = FOLDER_PATTERN.match(entry.name)
        num, slug = match.groups() if match else (None, entry.name)
        pages.append(
            Page(
                slug=slug,
                parent=parent,
                num=int(num) if num is not None else None,
                root=entry,
                kirby=kirby,
            )
        )

    return pages.sort_by("num")  # type: ignore[return-value]
