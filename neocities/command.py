"""Commands, the runner that dispatches them, and shared helpers."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import IO, Any, Callable, Mapping, Optional, Sequence

from .args import Args, parse_args
from .credentials import Credentials


def is_verbose(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when NEOCITIES_VERBOSE is set to ``true``."""
    env = os.environ if environ is None else environ
    return env.get("NEOCITIES_VERBOSE") == "true"


def dump(value: Any, stream: Optional[IO[str]] = None) -> None:
    """Write ``value`` as indented JSON followed by a newline."""
    out = sys.stdout if stream is None else stream
    text = json.dumps(value, indent=2, ensure_ascii=False)
    # HTML-sensitive characters are escaped so the output is safe to embed.
    for char, escaped in (
        ("&", "\\u0026"),
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    out.write(text + "\n")


def get_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """Read credentials from the environment.

    An API key in NEOCITIES_API_KEY wins over NEOCITIES_USER and
    NEOCITIES_PASS. When neither is usable a message is printed and
    SystemExit(0) is raised.
    """
    env = os.environ if environ is None else environ
    api_key = env.get("NEOCITIES_API_KEY", "")
    if api_key:
        return Credentials(key=api_key)

    user = env.get("NEOCITIES_USER", "")
    secret = env.get("NEOCITIES_PASS", "")
    if not user:
        print("Error: Missing environment variable NEOCITIES_USER or NEOCITIES_API_KEY")
        raise SystemExit(0)
    if not secret:
        print("Error: Missing environment variable NEOCITIES_PASS")
        raise SystemExit(0)
    return Credentials(user=user, password=secret)


class FlagError(ValueError):
    """A command line carried a flag the command does not accept."""


class _HelpRequested(FlagError):
    """The command line asked for the command's usage."""


@dataclass
class Command:
    """A sub-command: what it runs and how it is described."""

    run: Optional[Callable[["Command", Args], None]] = None
    key: str = ""
    usage: str = ""
    short: str = ""
    long: str = ""

    def name(self) -> str:
        """Return the key, or the first word of the usage line."""
        if self.key:
            return self.key
        return self.usage.split(" ")[0]

    def _parse_flags(self, params: Sequence[str]) -> list[str]:
        rest = list(params)
        while rest:
            arg = rest[0]
            if len(arg) < 2 or arg[0] != "-":
                break
            rest.pop(0)
            dashes = 1
            if arg[1] == "-":
                dashes = 2
                if len(arg) == 2:
                    break
            name = arg[dashes:]
            if not name or name[0] in "-=":
                self._fail(f"bad flag syntax: {arg}")
            name = name.split("=", 1)[0]
            if name in ("h", "help"):
                self.print_usage()
                raise _HelpRequested("flag: help requested")
            self._fail(f"flag provided but not defined: -{name}")
        return rest

    def _fail(self, message: str) -> None:
        print(message, file=sys.stderr)
        self.print_usage()
        raise FlagError(message)

    def call(self, args: Args) -> None:
        """Strip flags from ``args`` and run the command.

        Raises FlagError when the parameters hold an unknown flag.
        """
        args.params = self._parse_flags(args.params)
        if self.run is not None:
            self.run(self, args)

    def print_usage(self) -> None:
        """Print the usage line, if runnable, and the long description."""
        if self.runnable():
            print(f"usage: {self.formatted_usage()}\n")
        print(self.long.strip("\n"))

    def formatted_usage(self) -> str:
        return f"neocities {self.usage}"

    def runnable(self) -> bool:
        return self.run is not None


@dataclass
class ExecError:
    """The outcome of running a command: an error, if any, and an exit code."""

    error: Optional[BaseException] = None
    exit_code: int = 0

    @classmethod
    def from_error(cls, error: Optional[BaseException]) -> "ExecError":
        """Exit code 0 without an error, a child's status for a failed
        subprocess, and 1 for anything else."""
        if error is None:
            return cls(None, 0)
        if isinstance(error, subprocess.CalledProcessError):
            return cls(error, error.returncode)
        return cls(error, 1)

    def __str__(self) -> str:
        return "" if self.error is None else str(self.error)


@dataclass
class Runner:
    """A set of commands looked up by name."""

    usage: Optional[Callable[[], None]] = None
    commands: dict[str, Command] = field(default_factory=dict)

    def all(self) -> dict[str, Command]:
        return self.commands

    def use(self, command: Command) -> None:
        self.commands[command.name()] = command

    def lookup(self, name: str) -> Optional[Command]:
        return self.commands.get(name)

    def _print_usage(self) -> None:
        if self.usage is not None:
            self.usage()
            return
        lines = ["usage: neocities <command> [<args>]", "", "Commands:"]
        width = max((len(name) for name in self.commands), default=0)
        lines.extend(
            f"   {name.ljust(width)}  {command.short}"
            for name, command in sorted(self.commands.items())
        )
        print("\n".join(lines))

    def execute(self, argv: Optional[Sequence[str]] = None) -> ExecError:
        """Run the command named by the first word of ``argv``.

        Without a command the usage is printed; an unknown command does nothing.
        """
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
        if not args.command:
            self._print_usage()
            return ExecError.from_error(None)
        command = self.lookup(args.command)
        if command is not None and command.runnable():
            return self.call(command, args)
        return ExecError.from_error(None)

    def call(self, command: Command, args: Args) -> ExecError:
        """Run ``command`` and turn its outcome into an ExecError."""
        try:
            command.call(args)
        except _HelpRequested:
            return ExecError.from_error(None)
        except FlagError as exc:
            return ExecError.from_error(exc)
        except SystemExit as exc:
            code = exc.code
            if code is None:
                code = 0
            elif not isinstance(code, int):
                print(code, file=sys.stderr)
                code = 1
            return ExecError(None if code == 0 else exc, code)
        return ExecError.from_error(None)