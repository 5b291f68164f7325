from __future__ import annotations

from typing import TYPE_CHECKING

from kirby.cms.blueprint import FileBlueprintOptions
from kirby.core.exceptions import InvalidArgumentError
from kirby.core.utils import snake_case

if TYPE_CHECKING:
    from kirby.cms.file import File


class FilePermissions:
    """Which actions the file's blueprint allows."""

    ACTIONS = ("change_name", "create", "delete", "read", "replace", "update")

    def __init__(self, model: File) -> None:
        self.model = model
        blueprint = model.blueprint
        self.options = blueprint.options if blueprint is not None else FileBlueprintOptions()

    def can(self, action: str) -> bool:
        """Check an action, accepting 'changeName' as well as 'change_name'."""
        action = snake_case(action)
        if action not in self.ACTIONS:
            msg = f"Unknown file action: {action}"
            raise InvalidArgumentError(msg)
        return bool(getattr(self.options, action))

    def cannot(self, action: str) -> bool:
        return not self.can(action)

    def to_array(self) -> dict[str, bool]:
        """Permissions keyed the way blueprints spell them ('changeName')."""
        return self.options.model_dump(by_alias=True)
