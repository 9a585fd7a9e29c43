"""API picker modal screen."""

from __future__ import annotations

from collections.abc import Sequence

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option

from cosmos_explorer.experiences import Experience


class ApiPickerScreen(ModalScreen[Experience | None]):
    """Pick the API of the account being attached."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    CSS = """
    ApiPickerScreen {
        align: center middle;
    }
    #api-picker-dialog {
        width: 64;
        height: auto;
        border: solid $primary;
        padding: 1 2;
        background: $surface;
    }
    #api-picker-options {
        margin-top: 1;
        height: auto;
        max-height: 10;
    }
    """

    def __init__(self, experiences: Sequence[Experience], placeholder: str) -> None:
        super().__init__()
        self._experiences = list(experiences)
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(f"[bold #e0af68]{self._placeholder}[/]"),
            OptionList(
                *[Option(e.long_name, id=e.api.value) for e in self._experiences],
                id="api-picker-options",
            ),
            id="api-picker-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#api-picker-options", OptionList).focus()

    @on(OptionList.OptionSelected)
    def on_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(self._experiences[event.option_index])

    def action_cancel(self) -> None:
        self.dismiss(None)
