"""TUI modal screens."""

from cosmos_explorer.tui.screens.api_picker import ApiPickerScreen
from cosmos_explorer.tui.screens.confirm_detach import DetachConfirmScreen
from cosmos_explorer.tui.screens.connection_string import ConnectionStringScreen

__all__ = [
    "ApiPickerScreen",
    "ConnectionStringScreen",
    "DetachConfirmScreen",
]
