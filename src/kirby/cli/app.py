import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from kirby.cms.app import App
from kirby.cms.file import File
from kirby.core.exceptions import KirbyError
from kirby.core.logging import setup_logging

app = typer.Typer(name="kirby", help="Inspect the files of a Kirby content folder.")

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    root: Path = typer.Option(Path("."), "--root", "-r", help="Index root of the installation."),
    environment: str = typer.Option(None, "--env", help="Also apply site/config/config.<env>.yml."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
    log_file: Path = typer.Option(None, "--log-file", help="Also write logs to this file."),
):
    """
    Load the installation at --root.
    """
    setup_logging(log_level, log_file)
    ctx.obj = App.load(root.resolve(), environment)


def _find_file(kirby: App, file_id: str) -> File:
    file = kirby.file(file_id)
    if file is None:
        console.print(f"[bold red]File not found:[/] {file_id}")
        raise typer.Exit(code=1)
    return file


@app.command()
def files(ctx: typer.Context, page_id: str = typer.Argument(None, help="Page id; the site files when omitted.")):
    """
    List the files of a page or the site.
    """
    kirby: App = ctx.obj
    parent = kirby.site() if page_id is None else kirby.page(page_id)
    if parent is None:
        console.print(f"[bold red]Page not found:[/] {page_id}")
        raise typer.Exit(code=1)

    table = Table(title=f"Files of {parent.id}")
    table.add_column("Id", style="bold cyan")
    table.add_column("Template")
    table.add_column("Type")
    table.add_column("Size", justify="right")

    for file in parent.files():
        table.add_row(file.id, file.template or "", file.asset.type or "", file.asset.nice_size)

    console.print(table)


@app.command()
def info(ctx: typer.Context, file_id: str = typer.Argument(..., help="The file id.")):
    """
    Show everything known about a file as JSON.
    """
    file = _find_file(ctx.obj, file_id)
    console.print_json(json.dumps(file.to_array(), default=str))


@app.command("drag-text")
def drag_text(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="The file id."),
    drag_type: str = typer.Option("kirbytext", "--type", help="'kirbytext' or 'markdown'."),
    absolute: bool = typer.Option(False, "--absolute", help="Use the file id instead of the filename."),
):
    """
    Print the tag used when dragging the file onto a textarea.
    """
    file = _find_file(ctx.obj, file_id)
    try:
        typer.echo(file.drag_text(drag_type, absolute))
    except KirbyError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=1) from e


@app.command()
def thumb(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="The file id."),
    width: int = typer.Option(None, "--width", "-w", help="Maximum width."),
    height: int = typer.Option(None, "--height", "-h", help="Maximum height."),
    crop: bool = typer.Option(False, "--crop", help="Crop to exactly width x height."),
    quality: int = typer.Option(None, "--quality", "-q", help="JPEG/WebP quality."),
):
    """
    Generate a resized version of an image in the media folder.
    """
    file = _find_file(ctx.obj, file_id)
    version = file.thumb({"width": width, "height": height, "crop": crop, "quality": quality})
    if version is file:
        console.print(f"[bold yellow]{file.id} cannot be resized[/bold yellow]")
        raise typer.Exit(code=1)

    version.save()
    console.print(f"✅ {version.root}")
    typer.echo(version.url)


@app.command()
def panel(ctx: typer.Context, file_id: str = typer.Argument(..., help="The file id.")):
    """
    Show the panel url, icon and preview image of a file.
    """
    file = _find_file(ctx.obj, file_id)

    table = Table(title=f"Panel: {file.id}")
    table.add_column("Key", style="bold cyan")
    table.add_column("Value")

    table.add_row("url", file.panel_url())
    table.add_row("api", file.api_url())
    for key, value in file.panel_icon().items():
        table.add_row(f"icon.{key}", str(value))
    image = file.panel_image() or {}
    for key, value in image.items():
        table.add_row(f"image.{key}", str(value))

    console.print(table)


if __name__ == "__main__":
    app()
