from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from kirby.cms.mixins import HasFiles
from kirby.cms.model import ModelWithContent

if TYPE_CHECKING:
    from kirby.cms.app import App


class User(HasFiles, ModelWithContent):
    """An account folder under the accounts root, holding user.txt and avatar files."""

    ignored_files = ("index.php",)

    def __init__(
        self,
        id: str,
        content: dict[str, Any] | None = None,
        kirby: App | None = None,
    ) -> None:
        super().__init__(content, kirby)
        self._id = id

    def __repr__(self) -> str:
        return f"User({self.id!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def root(self) -> Path:
        return self.kirby.root("accounts") / self.id

    @property
    def email(self) -> str | None:
        return self.content().get("email").value

    @property
    def role(self) -> str:
        return self.content().get("role").or_("nobody").to_string()

    def content_file_name(self) -> str:
        return "user"

    def media_root(self) -> Path:
        return self.kirby.root("media") / "users" / self.id

    def media_url(self) -> str:
        return f"{self.kirby.url('media')}/users/{self.id}"

    def panel_path(self) -> str:
        return f"users/{self.id}"

    def panel_url(self, relative: bool = False) -> str:
        if relative:
            return f"/{self.panel_path()}"
        return f"{self.kirby.url('panel')}/{self.panel_path()}"

    def api_url(self, relative: bool = False) -> str:
        if relative:
            return self.panel_path()
        return f"{self.kirby.url('api')}/{self.panel_path()}"

    def to_array(self) -> dict[str, Any]:
        return {
            **super().to_array(),
            "email": self.email,
            "role": self.role,
        }
