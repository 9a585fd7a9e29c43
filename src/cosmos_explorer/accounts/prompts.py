"""User interaction needed while attaching accounts.

The registry only talks to an :class:`AccountPrompter`; the TUI and the
terminal each provide one. A prompter returns ``None`` when the user
dismisses a prompt.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Protocol

import click

from cosmos_explorer.experiences import Experience

Validator = Callable[[str], str | None]


class AccountPrompter(Protocol):
    async def pick_experience(
        self, experiences: Sequence[Experience], placeholder: str,
    ) -> Experience | None: ...

    async def input_connection_string(
        self,
        prompt: str,
        placeholder: str,
        value: str | None,
        validate: Validator,
    ) -> str | None: ...

    async def show_warning(self, message: str) -> None: ...


class TerminalPrompter:
    """Prompter for the command line. click prompts run in a worker thread."""

    async def pick_experience(
        self, experiences: Sequence[Experience], placeholder: str,
    ) -> Experience | None:
        return await asyncio.to_thread(self._pick_experience, list(experiences), placeholder)

    async def input_connection_string(
        self,
        prompt: str,
        placeholder: str,
        value: str | None,
        validate: Validator,
    ) -> str | None:
        return await asyncio.to_thread(
            self._input_connection_string, prompt, placeholder, value, validate,
        )

    async def show_warning(self, message: str) -> None:
        click.secho(message, fg="yellow", err=True)

    @staticmethod
    def _pick_experience(
        experiences: list[Experience], placeholder: str,
    ) -> Experience | None:
        click.echo(placeholder)
        for i, experience in enumerate(experiences, 1):
            click.echo(f"  {i}. {experience.long_name}")
        try:
            choice = click.prompt(
                "Choice", type=click.IntRange(1, len(experiences)),
            )
        except click.Abort:
            return None
        return experiences[choice - 1]

    @staticmethod
    def _input_connection_string(
        prompt: str,
        placeholder: str,
        value: str | None,
        validate: Validator,
    ) -> str | None:
        def _check(raw: str) -> str:
            text = raw.strip()
            error = validate(text)
            if error:
                raise click.BadParameter(error)
            return text

        click.echo(click.style(f"e.g. {placeholder}", dim=True))
        try:
            answer = click.prompt(prompt, default=value, value_proc=_check)
        except click.Abort:
            return None
        return answer or None
