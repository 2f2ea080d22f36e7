"""
AllStar node number — asked for once per run, shared by the steps.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

import click

from asl3_mapp.core.errors import StepError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")

PROMPT = "Enter your AllStar node number (NODE_NUMBER)"


def _click_prompt(text: str) -> str:
    return click.prompt(text, default="", show_default=False)


class NodeNumberSource:
    """Resolve NODE_NUMBER from ``--node-number`` or the terminal.

    Args:
        preset: Value given on the command line, if any.
        interactive: Whether a human is at the terminal.
        prompt: Prompt function, injectable for tests.
    """

    def __init__(
        self,
        preset: str | None = None,
        interactive: bool = False,
        prompt: Callable[[str], str] = _click_prompt,
    ):
        self._value = validate_node_number(preset) if preset is not None else None
        self._interactive = interactive
        self._prompt = prompt

    def get(self) -> str:
        if self._value is not None:
            return self._value
        if not self._interactive:
            raise StepError(
                "NODE_NUMBER is required. Pass --node-number or run interactively in a terminal."
            )
        self._value = validate_node_number(self._prompt(PROMPT))
        return self._value


def validate_node_number(value: str | None) -> str:
    """Return the node number stripped, or raise StepError."""
    node = (value or "").strip()
    if not node:
        raise StepError("No node number provided.")
    if not _DIGITS.fullmatch(node):
        raise StepError("Invalid node number. Use digits only.")
    return node
