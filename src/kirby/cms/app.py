"""The application container: configuration, roots, urls and components."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from kirby.core.config import KirbyConfig
from kirby.core.config_loader import ConfigLoader
from kirby.core.exceptions import InvalidArgumentError, NotFoundError

if TYPE_CHECKING:
    from kirby.cms.collection import Collection
    from kirby.cms.file import File
    from kirby.cms.page import Page
    from kirby.cms.site import Site
    from kirby.cms.user import User
    from kirby.image.thumbs import FileVersion, ThumbOptions

logger = logging.getLogger(__name__)


def _file_url(kirby: App, file: File) -> str:
    return file.media_url()


def _file_version(kirby: App, file: File, options: ThumbOptions) -> FileVersion:
    from kirby.image.thumbs import FileVersion

    return FileVersion(file, options)


DEFAULT_COMPONENTS: dict[str, Callable[..., Any]] = {
    "file::url": _file_url,
    "file::version": _file_version,
}


class App:
    """Holds the configuration and lazily builds the site tree.

    The most recently created App is available through ``App.instance()``,
    which models use when they were built without an explicit app.
    """

    _instance: ClassVar[App | None] = None

    def __init__(
        self,
        config: KirbyConfig | None = None,
        components: dict[str, Callable[..., Any]] | None = None,
        *,
        set_instance: bool = True,
    ) -> None:
        self.config = config if config is not None else KirbyConfig()
        self.components = {**DEFAULT_COMPONENTS, **(components or {})}
        self._site: Site | None = None
        self._users: Collection[User] | None = None

        if set_instance:
            App._instance = self

    def __repr__(self) -> str:
        return f"App(index={str(self.root('index'))!r})"

    @classmethod
    def instance(cls) -> App:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the current instance."""
        cls._instance = None

    @classmethod
    def load(cls, index_root: Path | None = None, environment: str | None = None, **kwargs: Any) -> App:
        """Create an App from the config files under site/config and the environment."""
        return cls(ConfigLoader(index_root, environment).load(), **kwargs)

    def option(self, key: str, default: Any = None) -> Any:
        return self.config.option(key, default)

    def root(self, name: str = "index") -> Path:
        roots = self.config.roots
        mapping = {
            "index": roots.index,
            "content": roots.abs_content,
            "media": roots.abs_media,
            "site": roots.abs_site,
            "blueprints": roots.abs_blueprints,
            "accounts": roots.abs_accounts,
            "config": roots.abs_config,
        }
        if name not in mapping:
            msg = f"Unknown root: {name}"
            raise InvalidArgumentError(msg)
        return mapping[name]

    def url(self, name: str = "index") -> str:
        urls = self.config.urls
        mapping = {
            "index": urls.base,
            "media": urls.media_url,
            "panel": f"{urls.base}/{self.config.panel.slug}",
            "api": f"{urls.base}/{self.config.api.slug}",
        }
        if name not in mapping:
            msg = f"Unknown url: {name}"
            raise InvalidArgumentError(msg)
        return mapping[name]

    def component(self, name: str) -> Callable[..., Any]:
        try:
            return self.components[name]
        except KeyError:
            msg = f"Unknown component: {name}"
            raise NotFoundError(msg) from None

    def site(self) -> Site:
        if self._site is None:
            from kirby.cms.site import Site

            self._site = Site(kirby=self)
        return self._site

    def users(self) -> Collection[User]:
        if self._users is None:
            from kirby.cms.collection import Collection
            from kirby.cms.user import User

            accounts = self.root("accounts")
            users: list[User] = []
            if accounts.is_dir():
                users = [
                    User(entry.name, kirby=self)
                    for entry in sorted(accounts.iterdir())
                    if entry.is_dir() and not entry.name.startswith(".")
                ]
            self._users = Collection(users)
        return self._users

    def user(self, user_id: str) -> User | None:
        return self.users().find(user_id)

    def page(self, page_id: str) -> Page | None:
        return self.site().find(page_id)

    def file(self, file_id: str) -> File | None:
        """Find a file by id: 'photo.jpg', 'projects/a/photo.jpg' or 'users/<id>/avatar.jpg'."""
        parent_id, _, filename = file_id.strip("/").rpartition("/")

        if not parent_id:
            return self.site().files().find(filename)

        # Page ids take precedence over user ids
        page = self.page(parent_id)
        if page is not None:
            return page.files().find(filename)

        user = self.user(parent_id.removeprefix("users/"))
        return user.files().find(filename) if user else None

    def flush(self) -> None:
        """Drop the cached site tree and users."""
        self._site = None
        self._users = None
