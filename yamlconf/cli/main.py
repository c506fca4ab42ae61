# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for yamlconf.

This is the single root command; every operation is a subcommand of
`yamlconf`. The global options (--log-level, --log-file) are inherited by
every subcommand through argparse's parent parser mechanism.

Usage:
    yamlconf check --config app.yaml --schema myapp.settings:AppConfig
    yamlconf describe --schema myapp.settings:AppConfig
"""

import argparse
import sys

from yamlconf.cli.commands import handle_check, handle_describe
from yamlconf.cli.exit_codes import USER_ERROR
from yamlconf.logging.logger import VALID_LOG_LEVELS


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    We use a separate parent parser (with add_help=False) so that help text
    doesn't collide between the parent and the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        dest="log_level",
        choices=list(VALID_LOG_LEVELS),
        help="Set the logging verbosity level.",
    )
    parent.add_argument(
        "--log-file",
        type=str,
        default=None,
        dest="log_file",
        help="Also write JSON log lines to this file.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    check_parser = subparsers.add_parser(
        "check",
        parents=[parent],
        help="Load a YAML config file into a schema class and validate it.",
    )
    check_parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to YAML configuration file.",
    )
    check_parser.add_argument(
        "--schema",
        type=str,
        required=True,
        help="Schema class as module.path:ClassName.",
    )
    check_parser.set_defaults(func=handle_check)

    describe_parser = subparsers.add_parser(
        "describe",
        parents=[parent],
        help="Print the constraints declared on a schema class as JSON.",
    )
    describe_parser.add_argument(
        "--schema",
        type=str,
        required=True,
        help="Schema class as module.path:ClassName.",
    )
    describe_parser.set_defaults(func=handle_describe)


def main() -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="yamlconf",
        description="yamlconf: typed YAML configuration with field constraints.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
