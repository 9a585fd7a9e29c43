"""Tree widget listing attached database accounts."""

from __future__ import annotations

from collections.abc import Sequence

from rich.text import Text
from textual.widgets import Tree

from cosmos_explorer.accounts.nodes import AccountNode
from cosmos_explorer.accounts.registry import AttachAccountPlaceholder
from cosmos_explorer.experiences import get_experience


def account_label(node: AccountNode) -> Text:
    label = Text(node.label)
    label.append(f"  {get_experience(node.api).short_name}", style="#7dcfff")
    if node.is_emulator:
        label.append("  emulator", style="dim")
    return label


class AccountsTree(Tree[object]):
    """Root is the registry; leaves are accounts or the attach placeholder."""

    DEFAULT_CSS = """
    AccountsTree {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, label: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.root.expand()

    def show_children(self, children: Sequence[AccountNode | AttachAccountPlaceholder]) -> None:
        self.root.remove_children()
        for child in children:
            if isinstance(child, AccountNode):
                self.root.add_leaf(account_label(child), data=child)
            else:
                self.root.add_leaf(Text(child.label, style="italic dim"), data=child)
        self.root.expand()

    @property
    def selected_account(self) -> AccountNode | None:
        node = self.cursor_node
        if node is None or not isinstance(node.data, AccountNode):
            return None
        return node.data
