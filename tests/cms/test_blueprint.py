"""Tests for file blueprints, permissions and rules."""

from pathlib import Path

import pytest

from kirby.cms.blueprint import FileBlueprint
from kirby.cms.file import File
from kirby.cms.rules import FileRules
from kirby.core.exceptions import (
    DuplicateError,
    InvalidArgumentError,
    LogicError,
    NotFoundError,
    PermissionDeniedError,
)
from tests.helpers.fs import make_image, write


@pytest.fixture
def locked(page):
    make_image(page.root / "locked.jpg")
    write(page.root / "locked.jpg.txt", "Template: locked\n")
    page.flush_files()
    return page.file("locked.jpg")


def test_load_from_file_and_builtin(kirby):
    root = kirby.root("blueprints")

    assert FileBlueprint.load("files/image", root) == {"title": "Image", "accept": "image/*"}
    assert FileBlueprint.load("files/default", root) == {"name": "default", "title": "File"}
    with pytest.raises(NotFoundError):
        FileBlueprint.load("files/missing", root)


def test_invalid_blueprint_files(kirby):
    root = kirby.root("blueprints")
    write(root / "files" / "broken.yml", "title: [unclosed\n")
    write(root / "files" / "scalar.yml", "just a string\n")

    with pytest.raises(InvalidArgumentError):
        FileBlueprint.load("files/broken", root)
    with pytest.raises(InvalidArgumentError):
        FileBlueprint.load("files/scalar", root)


def test_factory_without_fallback(photo):
    assert FileBlueprint.factory("files/missing", None, photo) is None


def test_factory_derives_name_and_title(kirby, photo):
    write(kirby.root("blueprints") / "files" / "gallery.yml", "accept:\n  extension: jpg, png\n")

    blueprint = FileBlueprint.factory("files/gallery", "files/default", photo)

    assert blueprint.name == "gallery"
    assert blueprint.title == "Gallery"
    assert blueprint.accept.extension == ["jpg", "png"]
    assert blueprint.accept.accepts_extension("PNG")
    assert not blueprint.accept.accepts_extension("gif")


def test_fields_alias():
    blueprint = FileBlueprint.model_validate({"fields": {"alt": {"type": "text"}}})

    assert blueprint.form_fields == {"alt": {"type": "text"}}


def test_accept_rules():
    blueprint = FileBlueprint.model_validate({"accept": {"mime": "image/jpeg, image/png", "type": ["image"]}})

    assert blueprint.accept.accepts_mime("image/png")
    assert not blueprint.accept.accepts_mime("image/gif")
    assert not blueprint.accept.accepts_mime(None)
    assert blueprint.accept.accepts_type("image")
    assert not blueprint.accept.accepts_type("document")
    assert FileBlueprint().accept.accepts_mime(None)


def test_options_shorthand_locks_every_action(locked):
    permissions = locked.permissions()

    assert permissions.cannot("changeName")
    assert permissions.cannot("update")
    assert permissions.cannot("delete")
    assert permissions.can("read")
    assert permissions.to_array()["changeName"] is False


def test_unknown_permission(photo):
    with pytest.raises(InvalidArgumentError):
        photo.permissions().can("fly")


def test_rules_reject_forbidden_actions(locked):
    rules = locked.rules()

    with pytest.raises(PermissionDeniedError):
        rules.update(locked, {"alt": "x"})
    with pytest.raises(PermissionDeniedError):
        rules.delete(locked)
    with pytest.raises(PermissionDeniedError):
        rules.change_name(locked, "other")


@pytest.mark.parametrize("extension", ["php", "php5", "phar", "html", "exe"])
def test_forbidden_extensions(extension):
    with pytest.raises(InvalidArgumentError):
        FileRules.valid_extension(extension)


def test_valid_filename_and_extension():
    assert FileRules.valid_extension("jpg")
    assert FileRules.valid_filename("photo.jpg")
    with pytest.raises(InvalidArgumentError):
        FileRules.valid_filename(".htaccess")
    with pytest.raises(InvalidArgumentError):
        FileRules.valid_extension("")


def test_change_name_rules(photo, page):
    with pytest.raises(InvalidArgumentError):
        FileRules.change_name(photo, "  ")

    make_image(page.root / "taken.jpg")
    with pytest.raises(DuplicateError):
        FileRules.change_name(photo, "taken")

    assert FileRules.change_name(photo, "free")


def test_create_rules(page, tmp_path: Path):
    upload = make_image(tmp_path / "upload.jpg")

    with pytest.raises(DuplicateError):
        FileRules.create(page.file("photo.jpg"), upload)
    with pytest.raises(InvalidArgumentError):
        FileRules.create(File("new.jpg", parent=page), tmp_path / "missing.jpg")

    assert FileRules.create(File("new.jpg", parent=page, template="image"), upload)


def test_create_checks_the_blueprint_accept_rules(page, tmp_path: Path):
    upload = tmp_path / "upload.pdf"
    upload.write_bytes(b"%PDF")

    with pytest.raises(InvalidArgumentError, match="mime"):
        FileRules.create(File("new.pdf", parent=page, template="image"), upload)


def test_replace_rules(photo, tmp_path: Path):
    with pytest.raises(LogicError):
        FileRules.replace(photo, make_image(tmp_path / "other.png"))
    with pytest.raises(InvalidArgumentError):
        FileRules.replace(photo, tmp_path / "missing.jpg")

    assert FileRules.replace(photo, make_image(tmp_path / "other.jpg"))
