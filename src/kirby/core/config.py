from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RootsSettings(BaseModel):
    """Filesystem roots.

    All roots are relative to 'index' unless absolute.
    index defaults to current working directory.
    """

    index: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the installation (defaults to current working directory)",
    )

    # Content
    content: Path = Field(default=Path("content"), description="Content directory")
    media: Path = Field(default=Path("media"), description="Public media directory")

    # Site
    site: Path = Field(default=Path("site"), description="Site directory")
    blueprints: Path = Field(default=Path("site/blueprints"), description="Blueprints directory")
    accounts: Path = Field(default=Path("site/accounts"), description="User accounts directory")
    config: Path = Field(default=Path("site/config"), description="Config directory")

    @property
    def abs_content(self) -> Path:
        return self._resolve(self.content)

    @property
    def abs_media(self) -> Path:
        return self._resolve(self.media)

    @property
    def abs_site(self) -> Path:
        return self._resolve(self.site)

    @property
    def abs_blueprints(self) -> Path:
        return self._resolve(self.blueprints)

    @property
    def abs_accounts(self) -> Path:
        return self._resolve(self.accounts)

    @property
    def abs_config(self) -> Path:
        return self._resolve(self.config)

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.index / path


class UrlsSettings(BaseModel):
    """Public URLs.

    'media' defaults to '<index>/media' when left empty.
    """

    index: str = Field(default="", description="Base URL of the site, without trailing slash")
    media: str | None = Field(default=None, description="Base URL of the media folder")

    @property
    def base(self) -> str:
        return self.index.rstrip("/")

    @property
    def media_url(self) -> str:
        if self.media:
            return self.media.rstrip("/")
        return f"{self.base}/media"


class PanelSettings(BaseModel):
    """Admin panel settings."""

    slug: str = Field(default="panel", description="URL slug of the panel")
    language: str = Field(default="en", description="Panel interface language")


class ApiSettings(BaseModel):
    """REST API settings."""

    slug: str = Field(default="api", description="URL slug of the API")


class KirbyConfig(BaseSettings):
    """Root configuration for a Kirby installation.

    Supports environment variable overrides with the pattern:
    KIRBY_SECTION__KEY (e.g., KIRBY_URLS__INDEX)
    """

    roots: RootsSettings = Field(default_factory=RootsSettings)
    urls: UrlsSettings = Field(default_factory=UrlsSettings)
    panel: PanelSettings = Field(default_factory=PanelSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form options, looked up with dotted keys (e.g. 'date.handler')",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="KIRBY_",
        env_nested_delimiter="__",
    )

    def option(self, key: str, default: Any = None) -> Any:
        """Look up an option by dotted key.

        Flat keys ('date.handler') win over nested mappings
        ({'date': {'handler': ...}}).
        """
        if key in self.options:
            return self.options[key]

        value: Any = self.options
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value
