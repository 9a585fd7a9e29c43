"""Cosmos Explorer TUI: the attached database accounts tree.

Layout:
  +----------------------------------------------+
  | Cosmos Explorer                              |
  +----------------------------------------------+
  | v Attached Database Accounts                 |
  |   |- foo.documents.azure.com (SQL)  SQL      |
  |   `- localhost:10255 (MongoDB)      MongoDB  |
  +----------------------------------------------+
  | a Attach  e Emulator  d Detach  r Refresh    |
  +----------------------------------------------+
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Tree

from cosmos_explorer.accounts.prompts import Validator
from cosmos_explorer.accounts.registry import AttachAccountPlaceholder, AttachedAccountsRegistry
from cosmos_explorer.exceptions import ExplorerError, HydrationError, UserCancelledError
from cosmos_explorer.experiences import Experience
from cosmos_explorer.tui.screens import (
    ApiPickerScreen,
    ConnectionStringScreen,
    DetachConfirmScreen,
)
from cosmos_explorer.tui.widgets import AccountsTree

logger = logging.getLogger(__name__)


class TextualPrompter:
    """AccountPrompter backed by modal screens. Call only from a worker."""

    def __init__(self, app: App) -> None:
        self._app = app

    async def pick_experience(
        self, experiences: Sequence[Experience], placeholder: str,
    ) -> Experience | None:
        return await self._app.push_screen_wait(ApiPickerScreen(experiences, placeholder))

    async def input_connection_string(
        self,
        prompt: str,
        placeholder: str,
        value: str | None,
        validate: Validator,
    ) -> str | None:
        return await self._app.push_screen_wait(
            ConnectionStringScreen(prompt, placeholder, value, validate),
        )

    async def show_warning(self, message: str) -> None:
        self._app.notify(message, severity="warning", timeout=5)


class ExplorerApp(App):
    """Browse, attach and detach database accounts."""

    TITLE = "Cosmos Explorer"

    BINDINGS = [
        Binding("a", "attach_account", "Attach"),
        Binding("e", "attach_emulator", "Emulator"),
        Binding("d", "detach_account", "Detach"),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, accounts: AttachedAccountsRegistry, **kwargs) -> None:
        super().__init__(**kwargs)
        self._accounts = accounts
        self._prompter = TextualPrompter(self)

    def compose(self) -> ComposeResult:
        yield Header()
        yield AccountsTree(self._accounts.label, id="accounts-tree")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#accounts-tree", AccountsTree).focus()
        self._refresh_tree()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_refresh(self) -> None:
        self._refresh_tree()

    def action_attach_account(self) -> None:
        self._attach_account()

    def action_attach_emulator(self) -> None:
        self._attach_emulator()

    def action_detach_account(self) -> None:
        self._detach_account()

    @on(Tree.NodeSelected)
    def on_node_selected(self, event: Tree.NodeSelected) -> None:
        if isinstance(event.node.data, AttachAccountPlaceholder):
            self._attach_account()

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    @work(exclusive=True, group="accounts-refresh")
    async def _refresh_tree(self) -> None:
        tree = self.query_one("#accounts-tree", AccountsTree)
        try:
            children = await self._accounts.load_children()
        except HydrationError as e:
            self.notify(str(e), severity="error", timeout=8)
            children = await self._accounts.load_children()
        tree.show_children(children)

    @work(group="accounts-edit")
    async def _attach_account(self) -> None:
        try:
            attached = await self._accounts.attach_new_account(self._prompter)
        except UserCancelledError:
            return
        except ExplorerError as e:
            logger.warning("Attach failed: %s", e)
            self.notify(str(e), severity="error", timeout=5)
            return
        if attached:
            self._refresh_tree()

    @work(group="accounts-edit")
    async def _attach_emulator(self) -> None:
        try:
            attached = await self._accounts.attach_emulator(self._prompter)
        except ExplorerError as e:
            logger.warning("Attaching emulator failed: %s", e)
            self.notify(str(e), severity="error", timeout=5)
            return
        if attached:
            self._refresh_tree()

    @work(group="accounts-edit")
    async def _detach_account(self) -> None:
        account = self.query_one("#accounts-tree", AccountsTree).selected_account
        if account is None:
            self.notify("Select an account to detach.", severity="information")
            return
        confirmed = await self.push_screen_wait(DetachConfirmScreen(account.label))
        if not confirmed:
            return
        try:
            await self._accounts.detach(account.id)
        except ExplorerError as e:
            logger.warning("Detach failed: %s", e)
            self.notify(str(e), severity="error", timeout=5)
        self._refresh_tree()
