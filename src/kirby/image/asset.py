"""Low-level introspection of a file on disk."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Extension -> file type
TYPES: dict[str, tuple[str, ...]] = {
    "archive": ("gz", "gzip", "tar", "tgz", "zip"),
    "audio": ("aif", "aiff", "m4a", "midi", "mp3", "wav"),
    "code": ("css", "js", "json", "java", "htm", "html", "php", "rb", "py", "scss", "xml", "yaml", "yml"),
    "document": (
        "csv", "doc", "docx", "dotx", "indd", "md", "mdown", "pdf", "ppt", "pptx",
        "rtf", "txt", "xl", "xls", "xlsx", "xltx",
    ),
    "image": (
        "ai", "avif", "bmp", "gif", "eps", "ico", "jpeg", "jpg", "jpe", "png", "ps",
        "psd", "svg", "tif", "tiff", "webp",
    ),
    "video": ("avi", "flv", "m4v", "mov", "movie", "mpe", "mpg", "mp4", "ogg", "ogv", "swf", "webm"),
}

# Mime types a browser can display inline
VIEWABLE_MIMES = frozenset(
    {"image/jpeg", "image/gif", "image/png", "image/svg+xml", "image/webp", "image/avif"}
)

# Extensions Pillow can resize
RESIZABLE_EXTENSIONS = frozenset({"jpg", "jpeg", "gif", "png", "webp"})

_UNITS = ("B", "kB", "MB", "GB", "TB", "PB")


def type_for_extension(extension: str) -> str | None:
    """Return the file type ('image', 'document', ...) for an extension."""
    extension = extension.lower()
    for file_type, extensions in TYPES.items():
        if extension in extensions:
            return file_type
    return None


def nice_size(size: int) -> str:
    """Format a byte count for humans: 1536 -> '1.5 kB'."""
    if size <= 0:
        return "0 B"

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1

    return f"{round(value, 2):g} {_UNITS[unit]}"


@dataclass(frozen=True)
class Dimensions:
    width: int = 0
    height: int = 0

    @property
    def ratio(self) -> float:
        if not self.height:
            return 0.0
        return self.width / self.height

    @property
    def orientation(self) -> str | None:
        if not self.width or not self.height:
            return None
        if self.width > self.height:
            return "landscape"
        if self.width < self.height:
            return "portrait"
        return "square"

    def fit(self, width: int | None = None, height: int | None = None) -> Dimensions:
        """Scale down to fit inside the box while keeping the ratio.

        Never upscales. A missing side is unconstrained.
        """
        if not self.width or not self.height:
            return Dimensions(width or 0, height or 0)

        scale = 1.0
        if width:
            scale = min(scale, width / self.width)
        if height:
            scale = min(scale, height / self.height)

        return Dimensions(max(1, round(self.width * scale)), max(1, round(self.height * scale)))

    def to_array(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "ratio": self.ratio,
            "orientation": self.orientation,
        }

    def __str__(self) -> str:
        return f"{self.width} × {self.height}"


class Asset:
    """A file on disk: name, extension, mime, type, size and image dimensions."""

    def __init__(self, root: Path | str, url: str | None = None) -> None:
        self.root = Path(root)
        self.url = url
        self._dimensions: Dimensions | None = None

    def __repr__(self) -> str:
        return f"Asset({str(self.root)!r})"

    @property
    def filename(self) -> str:
        return self.root.name

    @property
    def name(self) -> str:
        """Filename without extension."""
        return self.root.stem

    @property
    def extension(self) -> str:
        return self.root.suffix.lstrip(".").lower()

    @property
    def exists(self) -> bool:
        return self.root.is_file()

    @property
    def mime(self) -> str | None:
        mime, _ = mimetypes.guess_type(self.filename)
        return mime

    @property
    def type(self) -> str | None:
        return type_for_extension(self.extension)

    @property
    def size(self) -> int:
        if not self.exists:
            return 0
        return self.root.stat().st_size

    @property
    def nice_size(self) -> str:
        return nice_size(self.size)

    @property
    def modified(self) -> int | None:
        """Last modification time as a unix timestamp, None when missing."""
        if not self.exists:
            return None
        return int(self.root.stat().st_mtime)

    @property
    def is_viewable(self) -> bool:
        return self.mime in VIEWABLE_MIMES

    @property
    def is_resizable(self) -> bool:
        return self.extension in RESIZABLE_EXTENSIONS

    @property
    def dimensions(self) -> Dimensions:
        if self._dimensions is not None:
            return self._dimensions

        dimensions = Dimensions()
        if self.type == "image" and self.exists:
            try:
                with Image.open(self.root) as image:
                    dimensions = Dimensions(*image.size)
            except (OSError, UnidentifiedImageError) as exc:
                logger.debug("Cannot read dimensions of %s: %s", self.root, exc)

        self._dimensions = dimensions
        return dimensions

    @property
    def width(self) -> int:
        return self.dimensions.width

    @property
    def height(self) -> int:
        return self.dimensions.height

    @property
    def ratio(self) -> float:
        return self.dimensions.ratio

    def to_array(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "extension": self.extension,
            "filename": self.filename,
            "mime": self.mime,
            "modified": self.modified,
            "name": self.name,
            "niceSize": self.nice_size,
            "root": str(self.root),
            "size": self.size,
            "type": self.type,
            "url": self.url,
            "isResizable": self.is_resizable,
            "isViewable": self.is_viewable,
        }
        if self.type == "image":
            data["dimensions"] = self.dimensions.to_array()
        return data
