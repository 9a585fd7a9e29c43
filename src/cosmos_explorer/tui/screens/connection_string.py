"""Connection string input modal with inline validation."""

from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label

from cosmos_explorer.accounts.prompts import Validator


class ConnectionStringScreen(ModalScreen[str | None]):
    """Collect a connection string. Submitting is blocked while it is invalid."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    CSS = """
    ConnectionStringScreen {
        align: center middle;
    }
    #connection-string-dialog {
        width: 90;
        height: auto;
        border: solid $primary;
        padding: 1 2;
        background: $surface;
    }
    #connection-string-input {
        margin-top: 1;
    }
    #connection-string-error {
        color: $error;
        height: auto;
    }
    """

    def __init__(
        self,
        prompt: str,
        placeholder: str,
        value: str | None,
        validate: Validator,
    ) -> None:
        super().__init__()
        self._prompt = prompt
        self._placeholder = placeholder
        self._value = value or ""
        self._validate = validate
        self.error_message = ""

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(f"[bold #e0af68]{self._prompt}[/]"),
            Input(
                value=self._value,
                placeholder=self._placeholder,
                id="connection-string-input",
            ),
            Label("", id="connection-string-error", markup=False),
            id="connection-string-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#connection-string-input", Input).focus()

    def _show_error(self, error: str | None) -> None:
        self.error_message = error or ""
        self.query_one("#connection-string-error", Label).update(error or "")

    @on(Input.Changed)
    def on_changed(self, event: Input.Changed) -> None:
        text = event.value.strip()
        self._show_error(self._validate(text) if text else None)

    @on(Input.Submitted)
    def on_submit(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        error = self._validate(text)
        if error:
            self._show_error(error)
            return
        self.dismiss(text)

    def action_cancel(self) -> None:
        self.dismiss(None)
