"""Splitting a command line into a command and its parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class Args:
    """A command name and the parameters that follow it."""

    command: str = ""
    params: list[str] = field(default_factory=list)

    def is_params_empty(self) -> bool:
        return not self.params

    def first_param(self) -> str:
        """Return the first parameter, or an empty string if there is none."""
        return self.params[0] if self.params else ""


def parse_args(argv: Sequence[str]) -> Args:
    """Take the first word as the command and the rest as its parameters."""
    if not argv:
        return Args()
    command, *params = argv
    return Args(command=command, params=params)