"""Validation run before every file action."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from kirby.core.exceptions import (
    DuplicateError,
    InvalidArgumentError,
    LogicError,
    PermissionDeniedError,
)
from kirby.image.asset import Asset

if TYPE_CHECKING:
    from kirby.cms.file import File

# Substrings that must never appear in an uploaded file's extension
FORBIDDEN_EXTENSIONS = ("php", "phar", "htm", "exe")


class FileRules:
    @staticmethod
    def _require(file: File, action: str) -> None:
        if file.permissions().cannot(action):
            msg = f'You are not allowed to {action.replace("_", " ")} the file "{file.filename}"'
            raise PermissionDeniedError(msg)

    @classmethod
    def change_name(cls, file: File, name: str) -> bool:
        cls._require(file, "change_name")

        if not name.strip():
            msg = "The name must not be empty"
            raise InvalidArgumentError(msg)

        filename = f"{name}.{file.asset.extension}" if file.asset.extension else name
        duplicate = file.siblings(include_self=False).find(filename)
        if duplicate is not None or (file.root.parent / filename).exists():
            msg = f'A file with the name "{filename}" already exists'
            raise DuplicateError(msg)

        return True

    @classmethod
    def create(cls, file: File, source: Path) -> bool:
        if file.root.exists():
            msg = f'The file "{file.filename}" already exists'
            raise DuplicateError(msg)

        if not source.is_file():
            msg = f'The source file "{source}" does not exist'
            raise InvalidArgumentError(msg)

        cls.valid_filename(file.filename)
        cls.valid_extension(file.asset.extension)
        cls._require(file, "create")
        cls.accepts(file, Asset(source, None))
        return True

    @classmethod
    def delete(cls, file: File) -> bool:
        cls._require(file, "delete")
        return True

    @classmethod
    def replace(cls, file: File, source: Path) -> bool:
        cls._require(file, "replace")

        if not source.is_file():
            msg = f'The source file "{source}" does not exist'
            raise InvalidArgumentError(msg)

        upload = Asset(source)
        if upload.mime != file.asset.mime:
            msg = f'The uploaded file must be of the same mime type "{file.asset.mime}"'
            raise LogicError(msg)

        return True

    @classmethod
    def update(cls, file: File, content: dict[str, Any]) -> bool:
        cls._require(file, "update")
        return True

    @staticmethod
    def valid_filename(filename: str) -> bool:
        if filename.startswith("."):
            msg = f'Hidden files like "{filename}" cannot be uploaded'
            raise InvalidArgumentError(msg)
        return True

    @staticmethod
    def valid_extension(extension: str) -> bool:
        if not extension:
            msg = "The extension must not be empty"
            raise InvalidArgumentError(msg)

        for forbidden in FORBIDDEN_EXTENSIONS:
            if forbidden in extension.lower():
                msg = f'You are not allowed to upload "{extension}" files'
                raise InvalidArgumentError(msg)
        return True

    @staticmethod
    def accepts(file: File, upload: Asset) -> bool:
        """Check the upload against the blueprint's accept rules."""
        blueprint = file.blueprint
        if blueprint is None:
            return True

        accept = blueprint.accept
        extension = file.asset.extension
        if not accept.accepts_mime(upload.mime):
            msg = f'The mime type "{upload.mime}" is not allowed'
            raise InvalidArgumentError(msg)
        if not accept.accepts_extension(extension):
            msg = f'The extension "{extension}" is not allowed'
            raise InvalidArgumentError(msg)
        if not accept.accepts_type(file.asset.type):
            msg = f'The file type "{file.asset.type}" is not allowed'
            raise InvalidArgumentError(msg)
        return True
