"""Resized versions of image files in the public media folder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from PIL import Image, ImageOps
from pydantic import BaseModel, ConfigDict, Field

from kirby.image.asset import Asset, Dimensions

if TYPE_CHECKING:
    from kirby.cms.file import File

logger = logging.getLogger(__name__)


class ThumbOptions(BaseModel):
    """Modifications applied to an image."""

    model_config = ConfigDict(extra="ignore")

    width: int | None = Field(default=None, ge=1)
    height: int | None = Field(default=None, ge=1)
    crop: bool = False
    quality: int | None = Field(default=None, ge=1, le=100)
    grayscale: bool = False

    def target(self, source: Dimensions) -> Dimensions:
        """Final pixel size for a source of the given dimensions."""
        if self.crop and self.width and self.height:
            return Dimensions(self.width, self.height)
        if not self.width and not self.height:
            return source
        return source.fit(self.width, self.height)

    def attributes(self, target: Dimensions) -> str:
        """Filename suffix describing the modifications ('-128x85-crop-q80')."""
        parts = [f"{target.width or ''}x{target.height or ''}"]
        if self.crop:
            parts.append("crop")
        if self.grayscale:
            parts.append("bw")
        if self.quality:
            parts.append(f"q{self.quality}")
        return "-" + "-".join(parts)


class FileVersion:
    """A modified copy of a File, stored next to its media url."""

    def __init__(self, original: File, options: ThumbOptions) -> None:
        self.original = original
        self.options = options

    def __repr__(self) -> str:
        return f"FileVersion({self.url!r})"

    def __str__(self) -> str:
        return self.url

    @property
    def dimensions(self) -> Dimensions:
        return self.options.target(self.original.asset.dimensions)

    @property
    def filename(self) -> str:
        asset = self.original.asset
        suffix = self.options.attributes(self.dimensions)
        return f"{asset.name}{suffix}.{asset.extension}"

    @property
    def root(self) -> Path:
        return self.original.media_root().parent / self.filename

    @property
    def url(self) -> str:
        base = self.original.media_url().rsplit("/", 1)[0]
        return f"{base}/{self.filename}"

    @property
    def exists(self) -> bool:
        return self.root.is_file()

    def asset(self) -> Asset:
        return Asset(self.root, self.url)

    def modified(self) -> int | None:
        return self.asset().modified

    def save(self) -> FileVersion:
        """Render the version with Pillow unless it already exists."""
        if self.exists:
            return self

        target = self.dimensions
        self.root.parent.mkdir(parents=True, exist_ok=True)

        with Image.open(self.original.root) as image:
            if self.options.crop and self.options.width and self.options.height:
                result = ImageOps.fit(image, (target.width, target.height))
            else:
                result = image.resize((target.width, target.height))

            if self.options.grayscale:
                result = ImageOps.grayscale(result)

            save_args: dict[str, Any] = {}
            if self.options.quality:
                save_args["quality"] = self.options.quality
            if result.mode in ("RGBA", "P") and self.original.asset.extension in ("jpg", "jpeg"):
                result = result.convert("RGB")

            result.save(self.root, **save_args)

        logger.info("Generated %s (%s)", self.root, target)
        return self

    def to_array(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "root": str(self.root),
            "url": self.url,
            "dimensions": self.dimensions.to_array(),
            "modifications": self.options.model_dump(exclude_none=True),
        }
