"""The neocities command line client."""

from __future__ import annotations

import os
import sys
from typing import Callable, Optional, Sequence

import requests

from .api import (
    UnexpectedStatusCode,
    delete_files,
    key as fetch_key,
    list_files,
    site_info,
    upload_files,
)
from .args import Args
from .command import Command, Runner, dump, get_credentials, is_verbose
from .credentials import Credentials
from .response import Response

VERSION = "0.0.4"

HELP_TEXT = """usage: neocities <command> [<args>]

Commands:
   upload       Upload files to Neocities
   upload-root  Upload local files to webroot
   delete       Delete files from Neocities
   delete-all   Delete all remote files
   info         Info about Neocities websites
   key          Neocities API key
   list         List files on Neocities
   version      Show neocities client version

Help for a specific command:
   help [command]

Environment setup:

   export NEOCITIES_USER=<username>
   export NEOCITIES_PASS=<password>

  (OR)

   export NEOCITIES_API_KEY=<key>

"""


def print_usage() -> None:
    """Print the general usage text."""
    sys.stdout.write(HELP_TEXT)


def _perform(action: Callable[[], Response]) -> Response:
    """Run an API call; on failure print what came back and exit with 1."""
    try:
        return action()
    except UnexpectedStatusCode as exc:
        exc.response.print()
        raise SystemExit(1) from None
    except (requests.RequestException, ValueError):
        Response().print()
        raise SystemExit(1) from None


def _finish(response: Response) -> None:
    if is_verbose():
        response.print()
    raise SystemExit(0)


def list_current_files(credentials: Credentials) -> list[str]:
    """Return the remote paths to delete: everything but index.html,
    naming a directory instead of the files inside it."""
    try:
        listing = list_files(credentials)
    except (requests.RequestException, ValueError) as exc:
        if is_verbose():
            print(exc)
        return []

    files: list[str] = []
    last_dir = "/"
    for entry in listing.files:
        if entry.path == "index.html" or entry.path.startswith(last_dir):
            continue
        if entry.is_directory:
            last_dir = entry.path + "/"
        files.append(entry.path)
    return files


def list_local_files(directory: str = ".") -> list[str]:
    """Return the sorted entry names of ``directory``, leaving out .DS_Store."""
    try:
        names = sorted(os.listdir(directory))
    except OSError as exc:
        if is_verbose():
            print(exc)
        return []
    return [name for name in names if name != ".DS_Store"]


def _run_delete(command: Command, args: Args) -> None:
    if args.is_params_empty():
        command.print_usage()
        raise SystemExit(0)
    credentials = get_credentials()
    _finish(_perform(lambda: delete_files(credentials, args.params)))


def _run_delete_all(command: Command, args: Args) -> None:
    credentials = get_credentials()
    files = list_current_files(credentials)
    _finish(_perform(lambda: delete_files(credentials, files)))


def _run_info(command: Command, args: Args) -> None:
    if args.is_params_empty():
        credentials = get_credentials()
        site = credentials.user
    else:
        credentials = Credentials()
        site = args.first_param()
    response = _perform(lambda: site_info(credentials, site))
    if response.body:
        sys.stdout.write(response.body.decode("utf-8", errors="replace"))
    raise SystemExit(0)


def _run_key(command: Command, args: Args) -> None:
    credentials = get_credentials()
    try:
        answer = fetch_key(credentials)
    except (requests.RequestException, ValueError) as exc:
        print(exc)
        return
    print(answer.api_key)


def _run_list(command: Command, args: Args) -> None:
    credentials = get_credentials()
    try:
        listing = list_files(credentials)
    except (requests.RequestException, ValueError) as exc:
        print(exc)
        return
    dump(listing.to_json())


def _run_upload(command: Command, args: Args) -> None:
    if args.is_params_empty():
        command.print_usage()
        raise SystemExit(0)
    credentials = get_credentials()
    _finish(_perform(lambda: upload_files(credentials, args.params)))


def _run_upload_root(command: Command, args: Args) -> None:
    credentials = get_credentials()
    files = list_local_files(".")
    _finish(_perform(lambda: upload_files(credentials, files)))


def _run_version(command: Command, args: Args) -> None:
    program = command.formatted_usage().split(" ")[0]
    print(f"{program} {command.name()}", VERSION)


def build_runner() -> Runner:
    """Return a runner holding every command of the client."""
    runner = Runner(usage=print_usage)

    def run_help(command: Command, args: Args) -> None:
        if args.is_params_empty():
            print_usage()
            raise SystemExit(0)
        wanted = args.first_param()
        for candidate in runner.all().values():
            if candidate.name() == wanted:
                candidate.print_usage()
                raise SystemExit(0)

    commands = [
        Command(
            run=_run_delete,
            usage="delete <filename> [<another filename>]",
            short="Delete files from Neocities",
            long="Delete files from your Neocities website",
        ),
        Command(
            run=_run_delete_all,
            key="delete-all",
            usage="delete-all",
            short="Delete all remote files",
            long="Delete all remote files except index.html",
        ),
        Command(
            run=run_help,
            usage="help [command]",
            short="Show help",
            long="Show usage instructions for a command",
        ),
        Command(
            run=_run_info,
            usage="info [sitename]",
            short="Info about Neocities websites",
            long="Info about your Neocities website, or somebody elses",
        ),
        Command(
            run=_run_key,
            usage="key",
            short="Neocities API Key",
            long="Retrieve an API Key for your Neocities user",
        ),
        Command(
            run=_run_list,
            usage="list",
            short="List files on Neocities",
            long="List files in your Neocities website",
        ),
        Command(
            run=_run_upload,
            usage="upload <filename> [<another filename>]",
            short="Upload files to Neocities",
            long="Upload files to your Neocities website",
        ),
        Command(
            run=_run_upload_root,
            key="upload-root",
            usage="upload-root",
            short="Upload local files to webroot",
            long="Upload all local files to webroot",
        ),
        Command(
            run=_run_version,
            usage="version",
            short="Show neocities version",
            long="Show the version number of the neocities client",
        ),
    ]
    for command in commands:
        runner.use(command)
    return runner


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the client and return its exit code."""
    return build_runner().execute(argv).exit_code


if __name__ == "__main__":
    sys.exit(main())