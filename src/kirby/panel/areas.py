"""Panel area definitions.

An area is a section of the panel with a menu entry. Its views, dialogs and
dropdowns are callables returning props for the frontend.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from kirby.core.exceptions import NotFoundError
from kirby.panel.i18n import t

if TYPE_CHECKING:
    from kirby.cms.app import App
    from kirby.cms.file import File


def file_view(file: File) -> dict[str, Any]:
    """Props of the file editing view."""
    permissions = file.permissions()
    return {
        "component": "k-file-view",
        "title": file.filename,
        "props": {
            "model": {
                "id": file.id,
                "filename": file.filename,
                "mime": file.asset.mime,
                "niceSize": file.asset.nice_size,
                "template": file.template,
                "url": file.url,
                "content": file.content().to_array(),
            },
            "blueprint": file.blueprint.name if file.blueprint else None,
            "icon": file.panel_icon(),
            "image": file.panel_image(),
            "permissions": permissions.to_array(),
            "next": _sibling_link(file.next()),
            "prev": _sibling_link(file.prev()),
        },
        "breadcrumb": [
            *(
                {"label": str(page.title.or_(page.slug)), "link": page.panel_url(True)}
                for page in reversed(file.parents().values())
            ),
            {"label": file.filename, "link": file.panel_url(True)},
        ],
    }


def _sibling_link(file: File | None) -> dict[str, str] | None:
    if file is None:
        return None
    return {"link": file.panel_url(True), "tooltip": file.filename}


def file_dropdown(file: File) -> list[dict[str, Any]]:
    """Options menu of a file, disabled where the blueprint forbids the action."""
    language = file.kirby.config.panel.language
    permissions = file.permissions()
    return [
        {
            "click": "rename",
            "icon": "title",
            "text": t("file.changeName", language=language),
            "disabled": permissions.cannot("changeName"),
        },
        {
            "click": "replace",
            "icon": "upload",
            "text": t("replace", language=language),
            "disabled": permissions.cannot("replace"),
        },
        {
            "click": "delete",
            "icon": "trash",
            "text": t("delete", language=language),
            "disabled": permissions.cannot("delete"),
        },
    ]


def delete_dialog(file: File) -> dict[str, Any]:
    language = file.kirby.config.panel.language
    return {
        "component": "k-remove-dialog",
        "props": {"text": t("file.delete.confirm", language=language, filename=file.filename)},
    }


def site_area(kirby: App) -> dict[str, Any]:
    """The site area: the content tree and its files."""
    language = kirby.config.panel.language

    def breadcrumb_label() -> str:
        return kirby.site().title.or_(t("view.site", language=language)).to_string()

    views: dict[str, Callable[..., dict[str, Any]]] = {
        "site.file": lambda filename: file_view(_require_file(kirby, filename)),
        "page.file": lambda page_id, filename: file_view(
            _require_file(kirby, f"{page_id.replace('+', '/')}/{filename}")
        ),
    }

    return {
        "breadcrumbLabel": breadcrumb_label,
        "icon": "home",
        "label": t("view.site", language=language),
        "menu": True,
        "dialogs": {
            "file.delete": lambda file_id: delete_dialog(_require_file(kirby, file_id)),
        },
        "dropdowns": {
            "file": lambda file_id: file_dropdown(_require_file(kirby, file_id)),
        },
        "views": views,
    }


def _require_file(kirby: App, file_id: str) -> File:
    file = kirby.file(file_id)
    if file is None:
        msg = f'The file "{file_id}" cannot be found'
        raise NotFoundError(msg)
    return file
