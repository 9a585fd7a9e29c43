"""Detach confirmation modal screen."""

from __future__ import annotations

from rich.markup import escape
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label


class DetachConfirmScreen(ModalScreen[bool]):
    """Ask before detaching an account and deleting its stored secret."""

    _inherit_bindings = False

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("enter", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    DetachConfirmScreen {
        align: center middle;
    }
    #detach-confirm-dialog {
        width: 64;
        height: auto;
        border: solid $warning;
        padding: 1 2;
        background: $surface;
    }
    """

    def __init__(self, account_label: str) -> None:
        super().__init__()
        self._account_label = account_label

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(f"[bold #e0af68]Detach {escape(self._account_label)}?[/]"),
            Label("Press [#9ece6a]Y[/] or [#9ece6a]Enter[/] to detach."),
            Label("Press [#f7768e]N[/] or [dim]Esc[/dim] to keep it."),
            id="detach-confirm-dialog",
        )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)

    def on_key(self, event: events.Key) -> None:
        """Fallback key handling for terminals where bindings are unreliable."""
        key = event.key.lower()
        if key in ("y", "enter"):
            self.dismiss(True)
            event.stop()
            event.prevent_default()
        elif key in ("n", "escape"):
            self.dismiss(False)
            event.stop()
            event.prevent_default()
