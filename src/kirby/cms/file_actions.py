from __future__ import annotations

import logging
import re
import shutil
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kirby.cms.rules import FileRules
from kirby.core.utils import slugify

if TYPE_CHECKING:
    from kirby.cms.file import File

logger = logging.getLogger(__name__)

LANGUAGE_CODE = re.compile(r"^[a-z]{2}(-[a-z]{2})?$")


class FileActions:
    """Create, update, rename, replace and delete files on disk."""

    @classmethod
    def create(cls, props: dict[str, Any]) -> File:
        """Copy ``props["source"]`` into the parent folder and write its content file.

        Args:
            props: File props plus ``source`` (path of the upload) and an
                optional ``content`` mapping.

        Returns:
            The new File.

        """
        props = dict(props)
        source = Path(props.pop("source"))
        content = props.pop("content", None) or {}
        props.setdefault("filename", source.name)

        file = cls.factory(props)  # type: ignore[attr-defined]
        file.rules().create(file, source)

        file.root.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, file.root)
        file.write_content(content)
        file.reset_cache()

        logger.info("Created file %s", file.id)
        return file

    def update(self: File, data: dict[str, Any], language_code: str | None = None, validate: bool = True) -> File:
        """Merge data into the content file (None values remove fields)."""
        if validate:
            self.rules().update(self, data)

        content = self.content(language_code).update(data)
        self.write_content(content.data(), language_code)
        self.reset_cache()

        logger.info("Updated file %s", self.id)
        return self

    def change_name(self: File, name: str) -> File:
        """Rename the file and its content files, keeping the extension."""
        name = slugify(name, max_len=255)
        extension = self.asset.extension
        filename = f"{name}.{extension}" if extension else name

        if filename == self.filename:
            return self

        self.rules().change_name(self, name)

        content_files = self.content_files()
        renamed = self.clone(filename=filename)

        self.unpublish()
        self.root.rename(renamed.root)
        for language_code, content_file in content_files.items():
            content_file.rename(renamed.content_file(language_code))
        self.reset_cache()

        logger.info("Renamed file %s to %s", self.id, renamed.id)
        return renamed

    def replace(self: File, source: Path) -> File:
        """Overwrite the file with source, keeping its content."""
        source = Path(source)
        self.rules().replace(self, source)

        self.unpublish()
        shutil.copyfile(source, self.root)
        self.reset_cache()

        logger.info("Replaced file %s with %s", self.id, source)
        return self

    def delete(self: File) -> bool:
        """Remove the file, its content files and its published media."""
        self.rules().delete(self)

        self.unpublish()
        for content_file in self.content_files().values():
            content_file.unlink()
        self.root.unlink(missing_ok=True)
        self.reset_cache()

        logger.info("Deleted file %s", self.id)
        return True

    def unpublish(self: File) -> File:
        """Remove every published media folder (``<crc32>-<modified>``) of the file."""
        media_root = self.parent.media_root()
        prefix = str(zlib.crc32(self.filename.encode("utf-8")))
        if media_root.is_dir():
            for directory in media_root.glob(f"{prefix}-*"):
                shutil.rmtree(directory, ignore_errors=True)
                logger.debug("Removed media folder %s", directory)
        return self

    def content_files(self: File) -> dict[str | None, Path]:
        """Existing content files of the file, keyed by language code (None for the default)."""
        found: dict[str | None, Path] = {}
        if self.content_file().is_file():
            found[None] = self.content_file()

        directory = self.content_file_directory()
        prefix = f"{self.content_file_name()}."
        suffix = f".{self.content_file_extension()}"
        if not directory.is_dir():
            return found

        for path in directory.iterdir():
            name = path.name
            if not name.startswith(prefix) or not name.endswith(suffix):
                continue
            language_code = name[len(prefix) : -len(suffix)]
            if LANGUAGE_CODE.match(language_code) and path.is_file():
                found[language_code] = path
        return found
