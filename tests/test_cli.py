"""Tests for the kirby command line."""

import json
from pathlib import Path

from typer.testing import CliRunner

from kirby.cli.app import app

runner = CliRunner()


def invoke(site_root: Path, *args: str):
    return runner.invoke(app, ["--root", str(site_root), *args])


def test_files_lists_page_files(site_root: Path):
    result = invoke(site_root, "files", "projects/alpha")

    assert result.exit_code == 0
    assert "photo.jpg" in result.stdout
    assert "report.pdf" in result.stdout


def test_files_defaults_to_site_files(site_root: Path):
    result = invoke(site_root, "files")

    assert result.exit_code == 0
    assert "cover.png" in result.stdout


def test_files_unknown_page(site_root: Path):
    result = invoke(site_root, "files", "nowhere")

    assert result.exit_code == 1
    assert "Page not found" in result.stdout


def test_info_prints_json(site_root: Path):
    result = invoke(site_root, "info", "projects/alpha/photo.jpg")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["id"] == "projects/alpha/photo.jpg"
    assert data["template"] == "image"


def test_drag_text(site_root: Path):
    result = invoke(site_root, "drag-text", "projects/alpha/photo.jpg", "--type", "markdown")

    assert result.exit_code == 0
    assert result.stdout.strip() == "![A red square](photo.jpg)"


def test_drag_text_unknown_type(site_root: Path):
    result = invoke(site_root, "drag-text", "projects/alpha/photo.jpg", "--type", "html")

    assert result.exit_code == 1


def test_thumb_writes_the_version(site_root: Path):
    result = invoke(site_root, "thumb", "projects/alpha/photo.jpg", "--width", "100")

    assert result.exit_code == 0
    url = result.stdout.strip().splitlines()[-1]
    assert url.endswith("/photo-100x67.jpg")
    assert list((site_root / "media").rglob("photo-100x67.jpg"))


def test_thumb_of_a_document(site_root: Path):
    result = invoke(site_root, "thumb", "projects/alpha/report.pdf", "--width", "100")

    assert result.exit_code == 1


def test_panel(site_root: Path):
    result = invoke(site_root, "panel", "cover.png")

    assert result.exit_code == 0
    assert "/panel/site/files/cover.png" in result.stdout


def test_missing_file(site_root: Path):
    result = invoke(site_root, "info", "projects/alpha/missing.jpg")

    assert result.exit_code == 1
    assert "File not found" in result.stdout


def test_env_selects_an_environment_config(site_root: Path):
    config_dir = site_root / "site" / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.staging.yml").write_text("urls:\n  index: https://staging.example.com\n", encoding="utf-8")

    result = runner.invoke(app, ["--root", str(site_root), "--env", "staging", "panel", "cover.png"])

    assert result.exit_code == 0
    assert "https://staging.example.com/panel/site/files/cover.p" in result.stdout
