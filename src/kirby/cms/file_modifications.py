from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kirby.core.exceptions import InvalidArgumentError
from kirby.image.thumbs import FileVersion, ThumbOptions

if TYPE_CHECKING:
    from kirby.cms.file import File


class FileModifications:
    """Resized and cropped versions of image files."""

    def thumb(self: File, options: dict[str, Any] | str | None = None) -> File | FileVersion:
        """Return a version of the image, or the file itself when it cannot be resized.

        A string selects a preset from the ``thumbs.presets`` option.
        """
        if isinstance(options, str):
            preset = self.kirby.option(f"thumbs.presets.{options}")
            if preset is None:
                msg = f"Unknown thumb preset: {options}"
                raise InvalidArgumentError(msg)
            options = preset if isinstance(preset, dict) else {"width": preset}

        if not options or not self.asset.is_resizable:
            return self

        return self.kirby.component("file::version")(self.kirby, self, ThumbOptions.model_validate(options))

    def resize(self: File, width: int | None = None, height: int | None = None, quality: int | None = None) -> File | FileVersion:
        return self.thumb({"width": width, "height": height, "quality": quality})

    def crop(self: File, width: int, height: int | None = None, quality: int | None = None) -> File | FileVersion:
        return self.thumb({"width": width, "height": height or width, "quality": quality, "crop": True})

    def srcset(self: File, sizes: list[int] | dict[str, Any] | str | None = None) -> str | None:
        """Build a srcset attribute value.

        ``[300, 800]`` gives ``"<url> 300w, <url> 800w"``; a mapping pairs a
        descriptor with a width or thumb options (``{"2x": {"width": 1600}}``).
        A string selects the ``thumbs.srcsets`` option of that name.
        """
        if isinstance(sizes, str):
            sizes = self.kirby.option(f"thumbs.srcsets.{sizes}")
        if not sizes:
            return None

        candidates = []
        if isinstance(sizes, dict):
            for descriptor, value in sizes.items():
                options = value if isinstance(value, dict) else {"width": value}
                candidates.append(f"{self.thumb(options).url} {descriptor}")
        else:
            candidates = [f"{self.thumb({'width': width}).url} {width}w" for width in sizes]

        return ", ".join(candidates)
