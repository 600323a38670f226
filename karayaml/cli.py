"""Command line interface: ``karayaml add|edit|init|list|version``."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
import traceback
from collections.abc import Sequence
from typing import TextIO

from karayaml import karabiner, shortcuts
from karayaml.karabiner import KarabinerError
from karayaml.shortcuts import ShortcutError

VERSION_LABEL = "dev"

_log = logging.getLogger("karayaml")


class _StderrHandler(logging.StreamHandler):
    """Stream handler that always writes to the current ``sys.stderr``."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def _configure_logging(debug: bool) -> None:
    if not _log.handlers:
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        _log.addHandler(handler)
    _log.setLevel(logging.DEBUG if debug else logging.INFO)
    if debug:
        _log.debug("running in debug mode")


def _run_add(args: argparse.Namespace) -> int:
    if len(args.key) > 1:
        _log.error("key must only be one character")
        return 1
    try:
        shortcuts.add(args.key, args.file)
    except ShortcutError as exc:
        _log.error("%s", exc)
        return 1
    return 0


def _run_edit(args: argparse.Namespace) -> int:
    try:
        shortcuts.edit()
    except ShortcutError as exc:
        _log.error("%s", exc)
        return 1
    return 0


def _run_init(args: argparse.Namespace) -> int:
    try:
        config = karabiner.get_default()
    except KarabinerError:
        _log.error("failed to get karabiner config")
        return 1
    try:
        config.save()
    except KarabinerError:
        _log.error("failed to save config with shortcuts")
        return 1
    _log.info("success!")
    return 0


def _run_list(args: argparse.Namespace) -> int:
    try:
        found = shortcuts.list_shortcuts()
    except ShortcutError as exc:
        _log.error("%s", exc)
        return 1
    shortcuts.print_list(found)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--debug", action="store_true", default=argparse.SUPPRESS, help="set log level to debug"
    )
    parser = argparse.ArgumentParser(
        prog="karayaml",
        description="YAML-powered shortcut launcher for Karabiner-Elements on macOS",
    )
    parser.add_argument("--debug", action="store_true", help="set log level to debug")
    commands = parser.add_subparsers(dest="command", metavar="command")

    add = commands.add_parser("add", parents=[common], help="add a keyboard shortcut to open an app")
    add.add_argument("--key", default="", help="key for the shortcut")
    add.add_argument("--file", default="", help="path of the file to open")
    add.set_defaults(handler=_run_add)

    for name, help_text, handler in (
        ("edit", "edit keyboard shortcuts to open apps", _run_edit),
        ("init", "initialize keyboard shortcuts", _run_init),
        ("list", "list shortcuts to open apps", _run_list),
        ("version", "check the version of the cli", None),
    ):
        commands.add_parser(name, parents=[common], help=help_text).set_defaults(handler=handler)
    return parser


def report_error(msg: str, stream: TextIO | None = None) -> None:
    """Print an unexpected-error report with details about the environment."""
    out = stream if stream is not None else sys.stderr
    rule = "=" * 80
    lines = [
        rule,
        "The KaraYaml CLI encountered an unexpected error.",
        "We would appreciate a report.",
        "Please provide all of the below text in your report.",
        rule,
        f"CLI Version:       {VERSION_LABEL}",
        f"Python Version:    {platform.python_version()}",
        f"Implementation:    {platform.python_implementation()}",
        f"Architecture:      {platform.machine()}",
        f"Operating System:  {sys.platform}",
        f"Error Details:     {msg}",
        "",
    ]
    out.write("\n".join(lines) + "\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.debug)
    if args.command is None:
        parser.print_help()
        return 0
    if args.command == "version":
        print(VERSION_LABEL)
        return 0
    try:
        return args.handler(args)
    except Exception:
        report_error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())