"""Load a KirbyConfig from ``site/config``.

Configuration is layered, later layers winning:

1. Defaults of :class:`~kirby.core.config.KirbyConfig`
2. ``site/config/config.yml``
3. ``site/config/config.<environment>.yml`` (environment from the argument or ``KIRBY_ENV``)
4. Environment variables (``KIRBY_SECTION__KEY``)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

from kirby.core.config import KirbyConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "KIRBY_"
ENVIRONMENT_VARIABLE = "KIRBY_ENV"


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one YAML config file; a missing file is an empty mapping."""
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ValueError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Configuration root must be a mapping, got {type(data).__name__} in {path}"
        raise ValueError(msg)

    roots = data.get("roots")
    if roots is not None and not isinstance(roots, dict):
        msg = f"Configuration 'roots' must be a mapping, got {type(roots).__name__} in {path}"
        raise ValueError(msg)

    return data


def env_override_paths(environ: Mapping[str, str] | None = None) -> set[tuple[str, ...]]:
    """Config paths set through ``KIRBY_`` variables: KIRBY_URLS__INDEX -> ("urls", "index")."""
    environ = os.environ if environ is None else environ
    paths: set[tuple[str, ...]] = set()
    for key in environ:
        if key.startswith(ENV_PREFIX):
            parts = tuple(part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part)
            if parts:
                paths.add(parts)
    return paths


def deep_merge(
    base: dict[str, Any],
    override: Mapping[str, Any],
    skip: set[tuple[str, ...]] | None = None,
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Merge nested mappings; keys whose path is in skip keep the base value."""
    skip = skip or set()
    merged = deepcopy(base)

    for key, value in override.items():
        key_path = (*path, str(key).lower())
        if key_path in skip:
            continue
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value, skip, key_path)
        else:
            merged[key] = deepcopy(value)

    return merged


class ConfigLoader:
    """Builds the configuration of the installation rooted at index_root."""

    def __init__(self, index_root: Path | None = None, environment: str | None = None):
        self.index_root = Path(index_root) if index_root is not None else Path.cwd()
        self.environment = environment or os.environ.get(ENVIRONMENT_VARIABLE) or None

    @property
    def config_dir(self) -> Path:
        return self.index_root / "site" / "config"

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.yml"

    def config_files(self) -> list[Path]:
        """Existing config files, in the order they are applied."""
        candidates = [self.config_path]
        if self.environment:
            candidates.append(self.config_dir / f"config.{self.environment}.yml")
        return [path for path in candidates if path.is_file()]

    def load(self) -> KirbyConfig:
        # Defaults already carry the environment variables
        merged = KirbyConfig().model_dump(mode="json")
        skip = env_override_paths()

        for path in self.config_files():
            merged = deep_merge(merged, read_config_file(path), skip)
            logger.debug("Applied config file %s", path)

        # The index root is where the installation was found, whatever the files say
        merged.setdefault("roots", {})["index"] = str(self.index_root)
        return KirbyConfig.model_validate(merged)
