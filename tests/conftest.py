"""Shared fixtures: a small installation with pages, files and a user."""

from __future__ import annotations

from pathlib import Path

import pytest

from kirby.cms.app import App
from kirby.cms.file import File
from kirby.core.config import KirbyConfig, RootsSettings, UrlsSettings
from tests.helpers.fs import make_image, write


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Build an installation:

    content/
        site.txt, cover.png
        1_projects/projects.txt
        1_projects/1_alpha/project.txt, photo.jpg(+txt), report.pdf(+txt), data.xlsx
        about/default.txt
    site/blueprints/files/image.yml, locked.yml
    site/accounts/editor/user.txt, avatar.jpg
    """
    content = tmp_path / "content"
    write(content / "site.txt", "Title: Test Site\n")
    make_image(content / "cover.png", (64, 64), "blue")

    write(content / "1_projects" / "projects.txt", "Title: Projects\n")
    alpha = content / "1_projects" / "1_alpha"
    write(alpha / "project.txt", "Title: Alpha\n")
    make_image(alpha / "photo.jpg")
    write(alpha / "photo.jpg.txt", "Template: image\n\n----\n\nAlt: A red square\n")
    (alpha / "report.pdf").write_bytes(b"%PDF-1.4 fake")
    write(alpha / "report.pdf.txt", "Template: document\n")
    (alpha / "data.xlsx").write_bytes(b"spreadsheet")

    write(content / "about" / "default.txt", "Title: About\n")

    blueprints = tmp_path / "site" / "blueprints" / "files"
    write(blueprints / "image.yml", "title: Image\naccept: image/*\n")
    write(blueprints / "locked.yml", "title: Locked\noptions: false\n")

    editor = tmp_path / "site" / "accounts" / "editor"
    write(editor / "user.txt", "Email: editor@example.com\n\n----\n\nRole: admin\n")
    make_image(editor / "avatar.jpg", (40, 40))

    return tmp_path


@pytest.fixture
def config(site_root: Path) -> KirbyConfig:
    return KirbyConfig(
        roots=RootsSettings(index=site_root),
        urls=UrlsSettings(index="https://example.com"),
    )


@pytest.fixture
def kirby(config: KirbyConfig):
    app = App(config)
    yield app
    App.reset()


@pytest.fixture
def page(kirby: App):
    return kirby.page("projects/alpha")


@pytest.fixture
def photo(page) -> File:
    return page.file("photo.jpg")


@pytest.fixture
def report(page) -> File:
    return page.file("report.pdf")


@pytest.fixture(autouse=True)
def _clean_registries():
    yield
    File.methods.clear()
    File.models.clear()
    App.reset()
