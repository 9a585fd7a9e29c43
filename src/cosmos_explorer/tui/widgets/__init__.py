"""TUI widget components."""

from cosmos_explorer.tui.widgets.accounts_tree import AccountsTree

__all__ = ["AccountsTree"]
