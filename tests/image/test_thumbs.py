"""Tests for resized image versions."""

import pytest
from PIL import Image
from pydantic import ValidationError

from kirby.cms.app import App
from kirby.core.exceptions import InvalidArgumentError
from kirby.image.asset import Dimensions
from kirby.image.thumbs import FileVersion, ThumbOptions


def test_options_validation():
    with pytest.raises(ValidationError):
        ThumbOptions(width=0)
    with pytest.raises(ValidationError):
        ThumbOptions(quality=101)


def test_target_dimensions():
    source = Dimensions(300, 200)

    assert ThumbOptions().target(source) == source
    assert ThumbOptions(width=100).target(source) == Dimensions(100, 67)
    assert ThumbOptions(width=50, height=50, crop=True).target(source) == Dimensions(50, 50)
    assert ThumbOptions(width=1000).target(source) == source


def test_attributes():
    target = Dimensions(100, 67)

    assert ThumbOptions(width=100).attributes(target) == "-100x67"
    assert ThumbOptions(width=100, crop=True, grayscale=True, quality=70).attributes(target) == (
        "-100x67-crop-bw-q70"
    )


def test_resize(photo):
    version = photo.resize(100)

    assert isinstance(version, FileVersion)
    assert version.dimensions == Dimensions(100, 67)
    assert version.filename == "photo-100x67.jpg"
    assert version.root == photo.media_root().parent / "photo-100x67.jpg"
    assert version.url == photo.media_url().rsplit("/", 1)[0] + "/photo-100x67.jpg"
    assert str(version) == version.url
    assert not version.exists

    version.save()

    assert version.exists
    with Image.open(version.root) as image:
        assert image.size == (100, 67)
    assert version.modified() is not None
    assert version.asset().url == version.url


def test_crop_and_grayscale(photo):
    version = photo.thumb({"width": 50, "crop": True, "grayscale": True, "height": 40}).save()

    assert version.filename == "photo-50x40-crop-bw.jpg"
    with Image.open(version.root) as image:
        assert image.size == (50, 40)
        assert image.mode == "L"


def test_crop_defaults_to_a_square(photo):
    assert photo.crop(60).filename == "photo-60x60-crop.jpg"


def test_quality_is_part_of_the_filename(photo):
    assert photo.resize(100, quality=80).filename == "photo-100x67-q80.jpg"


def test_png_versions(kirby):
    version = kirby.site().file("cover.png").resize(32).save()

    assert version.filename == "cover-32x32.png"
    with Image.open(version.root) as image:
        assert image.size == (32, 32)


def test_thumb_returns_the_file_when_nothing_to_do(photo, report):
    assert photo.thumb() is photo
    assert photo.thumb({}) is photo
    assert report.thumb({"width": 100}) is report


def test_thumb_presets(kirby, photo):
    kirby.config.options["thumbs"] = {"presets": {"small": {"width": 60}, "tiny": 30}}

    assert photo.thumb("small").filename == "photo-60x40.jpg"
    assert photo.thumb("tiny").filename == "photo-30x20.jpg"
    with pytest.raises(InvalidArgumentError):
        photo.thumb("huge")


def test_srcset(kirby, photo):
    base = photo.media_url().rsplit("/", 1)[0]

    assert photo.srcset([100, 200]) == f"{base}/photo-100x67.jpg 100w, {base}/photo-200x133.jpg 200w"
    assert photo.srcset({"1x": 100, "2x": {"width": 200, "quality": 60}}) == (
        f"{base}/photo-100x67.jpg 1x, {base}/photo-200x133-q60.jpg 2x"
    )
    assert photo.srcset() is None

    kirby.config.options["thumbs"] = {"srcsets": {"default": [100]}}
    assert photo.srcset("default") == f"{base}/photo-100x67.jpg 100w"
    assert photo.srcset("missing") is None


def test_srcset_of_a_document_uses_its_url(report):
    assert report.srcset([100]) == f"{report.url} 100w"


def test_version_component_can_be_replaced(config):
    calls = []

    def version(kirby, file, options):
        calls.append((file.filename, options.width))
        return FileVersion(file, options)

    kirby = App(config, components={"file::version": version})
    kirby.file("projects/alpha/photo.jpg").resize(10)

    assert calls == [("photo.jpg", 10)]


def test_to_array(photo):
    data = photo.resize(100).to_array()

    assert data["filename"] == "photo-100x67.jpg"
    assert data["dimensions"]["width"] == 100
    assert data["modifications"] == {"width": 100, "crop": False, "grayscale": False}
