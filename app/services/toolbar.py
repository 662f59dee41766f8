"""Page toolbar shown above the admin forms and lists."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ToolbarButton:
    title: str
    css_class: str = "btn btn-secondary"
    on_click: str = ""
    icon: str = ""

    @classmethod
    def from_definition(cls, definition: dict) -> ToolbarButton:
        return cls(
            title=definition["title"],
            css_class=definition.get("class", "btn btn-secondary"),
            on_click=definition.get("onClick", ""),
            icon=definition.get("icon", ""),
        )


@dataclass
class Toolbar:
    title: str = ""
    buttons: list[ToolbarButton] = field(default_factory=list)

    def set_title(self, title: str) -> None:
        self.title = title

    def add_button(self, button: ToolbarButton) -> None:
        self.buttons.append(button)

    def add_button_from_definition(self, definition: dict) -> None:
        self.add_button(ToolbarButton.from_definition(definition))


def submit_form(task: str) -> str:
    return f"akeeba.System.submitForm('{task}');"


BROWSE_BUTTONS = [
    {"title": "Add", "class": "btn btn-success", "onClick": submit_form("add"), "icon": "fa fa-plus"},
    {"title": "Edit", "class": "btn btn-secondary border-light", "onClick": submit_form("edit"), "icon": "fa fa-pen-to-square"},
    {"title": "Copy", "class": "btn btn-secondary border-light", "onClick": submit_form("copy"), "icon": "fa fa-clone"},
    {"title": "Delete", "class": "btn btn-danger", "onClick": submit_form("remove"), "icon": "fa fa-trash-can"},
]

FORM_BUTTONS = [
    {"title": "Save & Close", "class": "btn btn-primary", "onClick": submit_form("save"), "icon": "fa fa-save"},
    {"title": "Save", "class": "btn btn-success", "onClick": submit_form("apply"), "icon": "fa fa-check"},
    {"title": "Cancel", "class": "btn btn-danger", "onClick": submit_form("cancel"), "icon": "fa fa-cancel"},
]


def build_toolbar(title: str, definitions: list[dict]) -> Toolbar:
    toolbar = Toolbar()
    for definition in definitions:
        toolbar.add_button_from_definition(definition)
    toolbar.set_title(title)
    return toolbar
