from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from kirby.cms.mixins import HasFiles
from kirby.cms.model import ModelWithContent

if TYPE_CHECKING:
    from kirby.cms.app import App
    from kirby.cms.collection import Pages
    from kirby.cms.page import Page


class Site(HasFiles, ModelWithContent):
    """The root of the content tree; its folder is the content root."""

    def __init__(self, content: dict[str, Any] | None = None, kirby: App | None = None) -> None:
        super().__init__(content, kirby)
        self._children: Pages | None = None

    def __repr__(self) -> str:
        return f"Site({self.url!r})"

    @property
    def id(self) -> str:
        return "/"

    @property
    def root(self) -> Path:
        return self.kirby.root("content")

    @property
    def url(self) -> str:
        return self.kirby.url("index") or "/"

    def content_file_name(self) -> str:
        return "site"

    def media_root(self) -> Path:
        return self.kirby.root("media") / "site"

    def media_url(self) -> str:
        return f"{self.kirby.url('media')}/site"

    def panel_path(self) -> str:
        return "site"

    def panel_url(self, relative: bool = False) -> str:
        if relative:
            return f"/{self.panel_path()}"
        return f"{self.kirby.url('panel')}/{self.panel_path()}"

    def api_url(self, relative: bool = False) -> str:
        if relative:
            return "site"
        return f"{self.kirby.url('api')}/site"

    def children(self) -> Pages:
        if self._children is None:
            from kirby.cms.page import scan_pages

            self._children = scan_pages(self.root, parent=None, kirby=self.kirby)
        return self._children

    def find(self, page_id: str) -> Page | None:
        """Find a page by its slash-separated id."""
        page: Page | None = None
        pages = self.children()
        for slug in page_id.strip("/").split("/"):
            page = next((child for child in pages if child.slug == slug), None)
            if page is None:
                return None
            pages = page.children()
        return page

    def index(self) -> list[Page]:
        """All pages, depth first."""
        pages: list[Page] = []
        for child in self.children():
            pages.append(child)
            pages.extend(child.index())
        return pages
