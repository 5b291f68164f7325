"""File blueprints: YAML schemas under ``<blueprints>/files/<name>.yml``."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from kirby.core.exceptions import InvalidArgumentError, NotFoundError

if TYPE_CHECKING:
    from kirby.cms.file import File

logger = logging.getLogger(__name__)

# Blueprints that exist even without a file on disk
BUILTIN_BLUEPRINTS: dict[str, dict[str, Any]] = {
    "files/default": {"name": "default", "title": "File"},
}


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class FileBlueprintOptions(BaseModel):
    """Actions the blueprint allows."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    change_name: bool = Field(default=True, alias="changeName")
    create: bool = True
    delete: bool = True
    read: bool = True
    replace: bool = True
    update: bool = True


class FileAccept(BaseModel):
    """Restrictions on uploads. Empty lists accept everything."""

    model_config = ConfigDict(extra="ignore")

    mime: list[str] = Field(default_factory=list)
    extension: list[str] = Field(default_factory=list)
    type: list[str] = Field(default_factory=list)

    @field_validator("mime", "extension", "type", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        return _split_list(value)

    def accepts_mime(self, mime: str | None) -> bool:
        if not self.mime:
            return True
        return mime is not None and any(fnmatch.fnmatch(mime, pattern) for pattern in self.mime)

    def accepts_extension(self, extension: str) -> bool:
        return not self.extension or extension.lower() in (e.lower() for e in self.extension)

    def accepts_type(self, file_type: str | None) -> bool:
        return not self.type or file_type in self.type


class FileBlueprint(BaseModel):
    """Schema of a file template."""

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True, populate_by_name=True)

    name: str = "default"
    title: str = "File"
    accept: FileAccept = Field(default_factory=FileAccept)
    options: FileBlueprintOptions = Field(default_factory=FileBlueprintOptions)
    form_fields: dict[str, Any] = Field(default_factory=dict, alias="fields")
    model: Any = Field(default=None, exclude=True)

    @field_validator("accept", mode="before")
    @classmethod
    def _accept_shorthand(cls, value: Any) -> Any:
        # `accept: image/*` is short for `accept: {mime: image/*}`
        if isinstance(value, str):
            return {"mime": value}
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _options_shorthand(cls, value: Any) -> Any:
        # `options: false` locks every action
        if isinstance(value, bool):
            return {field: value for field in ("changeName", "create", "delete", "replace", "update")}
        return value

    @classmethod
    def path(cls, name: str, root: Path) -> Path:
        return root / f"{name}.yml"

    @classmethod
    def load(cls, name: str, root: Path) -> dict[str, Any]:
        """Read blueprint props by name ('files/image'), falling back to built-ins."""
        path = cls.path(name, root)
        if path.is_file():
            try:
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as exc:
                msg = f"Invalid blueprint {path}: {exc}"
                raise InvalidArgumentError(msg) from exc
            if not isinstance(data, dict):
                msg = f"Blueprint {path} must be a mapping, got {type(data).__name__}"
                raise InvalidArgumentError(msg)
            return data

        if name in BUILTIN_BLUEPRINTS:
            return dict(BUILTIN_BLUEPRINTS[name])

        msg = f"Blueprint not found: {name}"
        raise NotFoundError(msg)

    @classmethod
    def factory(cls, name: str, fallback: str | None, model: File) -> FileBlueprint | None:
        """Build the blueprint for a model, trying fallback when name is missing."""
        root = model.kirby.root("blueprints")
        try:
            props = cls.load(name, root)
        except NotFoundError:
            if fallback is None:
                return None
            logger.debug("Blueprint %s not found, using %s", name, fallback)
            return cls.factory(fallback, None, model)

        props.setdefault("name", name.rsplit("/", 1)[-1])
        props.setdefault("title", str(props["name"]).capitalize())
        props["model"] = model
        return cls.model_validate(props)
