"""The File model.

A File wraps a :class:`~kirby.image.asset.Asset` (size, mime, dimensions, ...)
and adds everything the CMS knows about it: the parent page, site or user,
urls, its content file (``<filename>.txt``) with meta data, the blueprint and
the information the panel needs to display it.
"""

from __future__ import annotations

import logging
import warnings
import zlib
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from kirby.cms.blueprint import FileBlueprint
from kirby.cms.collection import Files, Pages
from kirby.cms.content import Content
from kirby.cms.file_actions import FileActions
from kirby.cms.file_modifications import FileModifications
from kirby.cms.mixins import HasFiles, HasMethods, HasSiblings
from kirby.cms.model import ModelWithContent
from kirby.cms.page import Page
from kirby.cms.permissions import FilePermissions
from kirby.cms.rules import FileRules
from kirby.cms.site import Site
from kirby.cms.user import User
from kirby.core.exceptions import InvalidArgumentError
from kirby.core.utils import query as run_query
from kirby.core.utils import template as render_template
from kirby.image.asset import Asset

if TYPE_CHECKING:
    from kirby.cms.app import App

logger = logging.getLogger(__name__)

COLOR_BLUE = "#81a2be"
COLOR_PURPLE = "#b294bb"
COLOR_ORANGE = "#de935f"
COLOR_GREEN = "#a7bd68"
COLOR_AQUA = "#8abeb7"
COLOR_YELLOW = "#f0c674"
COLOR_RED = "#d16464"
COLOR_WHITE = "#c5c9c6"

PANEL_ICON_TYPES: dict[str, dict[str, str]] = {
    "image": {"color": COLOR_ORANGE, "type": "file-image"},
    "video": {"color": COLOR_YELLOW, "type": "file-video"},
    "document": {"color": COLOR_RED, "type": "file-document"},
    "audio": {"color": COLOR_AQUA, "type": "file-audio"},
    "code": {"color": COLOR_BLUE, "type": "file-code"},
    "archive": {"color": COLOR_WHITE, "type": "file-zip"},
}

# Extension rules win over type rules
PANEL_ICON_EXTENSIONS: dict[str, dict[str, str]] = {
    "indd": {"color": COLOR_PURPLE},
    "xls": {"color": COLOR_GREEN, "type": "file-spreadsheet"},
    "xlsx": {"color": COLOR_GREEN, "type": "file-spreadsheet"},
    "csv": {"color": COLOR_GREEN, "type": "file-spreadsheet"},
    "docx": {"color": COLOR_BLUE, "type": "file-word"},
    "doc": {"color": COLOR_BLUE, "type": "file-word"},
    "rtf": {"color": COLOR_BLUE, "type": "file-word"},
    "mdown": {"type": "file-text"},
    "md": {"type": "file-text"},
}

PANEL_IMAGE_DEFAULTS: dict[str, Any] = {"ratio": "3/2", "back": "pattern", "cover": False}
PANEL_IMAGE_SRCSET = [128, 256, 512, 768, 1024, 2048]

DATE_HANDLERS: dict[str, Callable[[str, int], str]] = {
    "strftime": lambda fmt, timestamp: datetime.fromtimestamp(timestamp).strftime(fmt),
    "iso": lambda fmt, timestamp: datetime.fromtimestamp(timestamp).isoformat(),
}


class File(FileActions, FileModifications, HasMethods, HasSiblings, ModelWithContent):
    """A single managed file (image, document, ...) of a page, the site or a user.

    Attribute lookups that are not defined on the File itself are resolved, in
    this order, against the asset (``file.mime``, ``file.width``), registered
    file methods (``File.register_method``) and finally content fields
    (``file.alt`` returns the ``alt`` Field).
    """

    # Registered file methods
    methods: ClassVar[dict[str, Callable[..., Any]]] = {}

    # Registered File subclasses by template name
    models: ClassVar[dict[str, type[File]]] = {}

    def __init__(
        self,
        filename: str,
        parent: Site | Page | User | None = None,
        template: str | None = None,
        url: str | None = None,
        blueprint: dict[str, Any] | None = None,
        content: dict[str, Any] | None = None,
        root: str | Path | None = None,
        kirby: App | None = None,
    ) -> None:
        if not filename:
            msg = "The filename is required"
            raise InvalidArgumentError(msg)

        super().__init__(content, kirby)
        self._filename = filename
        self._parent = parent
        self._template = template
        self._template_prop = template
        self._url = url
        self._id: str | None = None
        self._asset: Asset | None = None
        self._blueprint: FileBlueprint | None = None
        self._blueprint_props = blueprint

        # The root is always derived from the parent
        self._root: Path | None = None

        if blueprint is not None:
            self._blueprint = FileBlueprint.model_validate({**blueprint, "model": self})

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        # asset proxy
        asset = self.asset
        if hasattr(type(asset), name):
            return getattr(asset, name)

        # file methods
        if self.has_method(name):
            return lambda *args, **kwargs: self.call_method(name, args, kwargs)

        # content fields
        return self.content().get(name)

    def __repr__(self) -> str:
        return f"File({self.id!r})"

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def factory(cls, props: dict[str, Any]) -> File:
        """Build a File, using a registered model when ``props["model"]`` is set."""
        props = dict(props)
        model = props.pop("model", None)
        if model:
            return cls.model(model, props)
        return cls(**props)

    @classmethod
    def model(cls, name: str, props: dict[str, Any] | None = None) -> File:
        """Instantiate the File subclass registered for name, or a plain File."""
        props = props or {}
        model_class = cls.models.get(name)
        if model_class is not None and issubclass(model_class, File):
            return model_class(**props)
        return cls(**props)

    def clone(self, **props: Any) -> File:
        defaults = {
            "filename": self.filename,
            "parent": self._parent,
            "template": self._template,
            "kirby": self._kirby,
        }
        return type(self)(**{**defaults, **props})

    def reset_cache(self) -> None:
        """Forget memoized asset, content, template, blueprint and the parent's file list."""
        self._asset = None
        self._content = None
        self._template = None
        self._blueprint = None
        parent = self.parent
        if isinstance(parent, HasFiles):
            parent.flush_files()

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def id(self) -> str:
        if self._id is None:
            parent = self.parent
            if isinstance(parent, (Page, User)):
                self._id = f"{parent.id}/{self.filename}"
            else:
                self._id = self.filename
        return self._id

    def is_(self, file: File) -> bool:
        """Whether file is the same file as this one."""
        return self.id == file.id

    @property
    def parent(self) -> Site | Page | User:
        if self._parent is None:
            self._parent = self.kirby.site()
        return self._parent

    @property
    def parent_id(self) -> str | None:
        parent = self.parent
        return parent.id if parent is not None else None

    @property
    def page(self) -> Page | None:
        parent = self.parent
        return parent if isinstance(parent, Page) else None

    @property
    def site(self) -> Site:
        parent = self.parent
        return parent if isinstance(parent, Site) else self.kirby.site()

    def parents(self) -> Pages:
        """The parent page and all its ancestors, nearest first."""
        parent = self.parent
        if isinstance(parent, Page):
            return parent.parents().prepend(parent)  # type: ignore[return-value]
        return Pages()

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = self.parent.root / self.filename
        return self._root

    @property
    def asset(self) -> Asset:
        if self._asset is None:
            self._asset = Asset(self.root)
        return self._asset

    @property
    def url(self) -> str:
        if self._url is None:
            self._url = self.kirby.component("file::url")(self.kirby, self)
        return self._url

    @property
    def template(self) -> str | None:
        if self._template is None:
            self._template = self.content().get("template").value or self._template_prop
        return self._template

    @property
    def blueprint(self) -> FileBlueprint | None:
        if self._blueprint is None and self._blueprint_props is not None:
            self._blueprint = FileBlueprint.model_validate({**self._blueprint_props, "model": self})
        if self._blueprint is None:
            name = f"files/{self.template}" if self.template else "files/default"
            self._blueprint = FileBlueprint.factory(name, "files/default", self)
        return self._blueprint

    def template_siblings(self, include_self: bool = True) -> Files:
        """Siblings sharing this file's template."""
        return self.siblings(include_self).filter_by("template", self.template)  # type: ignore[return-value]

    def api_url(self, relative: bool = False) -> str:
        return f"{self.parent.api_url(relative)}/files/{self.filename}"

    def panel_path(self) -> str:
        return f"files/{self.filename}"

    def panel_url(self, relative: bool = False) -> str:
        return f"{self.parent.panel_url(relative)}/{self.panel_path()}"

    def media_hash(self) -> str:
        """Folder name in the media root; changes whenever the file does."""
        return f"{zlib.crc32(self.filename.encode('utf-8'))}-{self.modified() or 0}"

    def media_root(self) -> Path:
        return self.parent.media_root() / self.media_hash() / self.filename

    def media_url(self) -> str:
        return f"{self.parent.media_url()}/{self.media_hash()}/{self.filename}"

    def modified(
        self,
        fmt: str | None = None,
        handler: str | Callable[[str, int], str] | None = None,
    ) -> int | str | None:
        """Latest modification time of the file or its content file.

        Args:
            fmt: Optional format; without it the unix timestamp is returned.
            handler: 'strftime', 'iso' or a callable ``(fmt, timestamp)``.
                Defaults to the ``date.handler`` option.

        """
        content_file = self.content_file()
        timestamps = [self.asset.modified]
        if content_file.is_file():
            timestamps.append(int(content_file.stat().st_mtime))

        modified = max((t for t in timestamps if t is not None), default=None)
        if fmt is None or modified is None:
            return modified

        handler = handler or self.kirby.option("date.handler", "strftime")
        if callable(handler):
            return handler(fmt, modified)
        if handler not in DATE_HANDLERS:
            msg = f"Unknown date handler: {handler}"
            raise InvalidArgumentError(msg)
        return DATE_HANDLERS[handler](fmt, modified)

    def content_file_data(self, data: dict[str, Any], language_code: str | None = None) -> dict[str, Any]:
        """Store the template in addition to the other content."""
        result = dict(data)
        result.setdefault("template", self.template)
        return result

    def content_file_directory(self) -> Path:
        return self.root.parent

    def content_file_name(self) -> str:
        return self.filename

    def meta(self) -> Content:
        warnings.warn(
            "File.meta() is deprecated. Use File.content() instead.",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.content()

    def drag_text(self, drag_type: str = "kirbytext", absolute: bool = False) -> str:
        """Tag inserted when the file is dragged onto a textarea in the panel."""
        url = self.id if absolute else self.filename
        is_image = self.asset.type == "image"

        if drag_type == "kirbytext":
            return f"(image: {url})" if is_image else f"(file: {url})"
        if drag_type == "markdown":
            if is_image:
                return f"![{self.content().get('alt')}]({url})"
            return f"[{self.filename}]({url})"

        msg = f"Unknown drag text type: {drag_type}"
        raise InvalidArgumentError(msg)

    def panel_icon(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        params = params or {}
        definition = {
            **PANEL_ICON_TYPES.get(self.asset.type or "", {}),
            **PANEL_ICON_EXTENSIONS.get(self.asset.extension, {}),
        }
        return {
            "type": definition.get("type", "file"),
            "color": definition.get("color", COLOR_WHITE),
            "back": params.get("back") or "pattern",
            "ratio": params.get("ratio"),
        }

    def panel_image(self, settings: dict[str, Any] | str | bool | None = None) -> dict[str, Any] | None:
        """Preview image definition for the panel.

        Args:
            settings: ``False`` switches the image off, a string is a query for
                the image to show, a mapping may hold ``query`` plus display
                settings (``ratio``, ``back``, ``cover``).

        """
        if settings is False:
            return None
        if isinstance(settings, str):
            settings = {"query": settings}

        settings = dict(settings) if isinstance(settings, dict) else {}

        image = self.query(settings.get("query"), File)
        if image is None and self.asset.is_viewable:
            image = self

        if image is not None:
            thumb = image.thumb({"width": 128, "height": 128})
            settings["url"] = f"{thumb.url}?t={image.modified() or ''}"
            settings["srcset"] = image.srcset(PANEL_IMAGE_SRCSET)
            settings.pop("query", None)

        return {**PANEL_IMAGE_DEFAULTS, **settings}

    def permissions(self) -> FilePermissions:
        return FilePermissions(self)

    def rules(self) -> FileRules:
        return FileRules()

    def query(self, query: str | None = None, expect: type | None = None) -> Any:
        """Run a string query with ``kirby``, ``site`` and ``file`` in scope."""
        if query is None:
            return None

        result = run_query(query, {"kirby": self.kirby, "site": self.site, "file": self})
        if expect is not None and not isinstance(result, expect):
            return None
        return result

    def siblings_collection(self) -> Files:
        return self.parent.files()

    def files(self) -> Files:
        return self.siblings_collection()

    def to_string(self, template: str | None = None) -> str:
        if template is None:
            return self.id
        return render_template(template, {"file": self, "site": self.site, "kirby": self.kirby})

    def to_array(self) -> dict[str, Any]:
        """Asset information merged with the model's own data."""
        return {
            **self.asset.to_array(),
            **super().to_array(),
            "filename": self.filename,
            "parentId": self.parent_id,
            "root": str(self.root),
            "template": self.template,
            "url": self.url,
        }

    def debug_info(self) -> dict[str, Any]:
        return {
            **self.to_array(),
            "content": self.content(),
            "siblings": self.siblings(),
        }

