"""Helix command-line interface.

Usage::

    helix create my-app [basicapp] [--verbose]
    helix create . [basicapp]
    helix start
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn

from helix import __version__
from helix.config import GenerationContext, HelixConfig
from helix.messages import success_text, usage_text
from helix.scaffolder.errors import HelixError, MissingProjectNameError
from helix.scaffolder.generator import ProjectGenerator
from helix.scaffolder.guard import start_project
from helix.scaffolder.templates import list_templates
from helix.utils import console, err_console, print_error, print_step

COMMANDS = ("create", "start")


class HelixArgumentParser(argparse.ArgumentParser):
    """Reports bad options like any other usage error (exit 1)."""

    def error(self, message: str) -> NoReturn:
        print_error(message)
        self.exit(1)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser; commands are dispatched by :func:`main`.

    Options may appear anywhere, e.g. ``helix create my-app --verbose basicapp``.
    """
    parser = HelixArgumentParser(
        prog="helix",
        description="Helix -- fullstack FBCA project generator",
        add_help=False,
    )
    parser.add_argument("command", nargs="?", default=None)
    parser.add_argument("arguments", nargs="*")
    parser.add_argument("--verbose", action="store_true", help="Print every generation step")
    parser.add_argument("--version", action="version", version=f"helix {__version__}")
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    return parser


def print_usage(config: HelixConfig) -> None:
    """Print the usage screen to stdout."""
    packaged = list_templates(config.templates_dir)
    console.print(
        usage_text(config.available_templates, packaged, config.default_template),
        markup=False,
        highlight=False,
    )


async def run_create(
    config: HelixConfig,
    arguments: list[str],
    verbose: bool,
    cwd: Path | None = None,
) -> int:
    """Handle ``helix create <name|.> [template]``."""
    if not arguments:
        raise MissingProjectNameError()
    project_name = arguments[0]
    template = arguments[1] if len(arguments) > 1 else config.default_template

    context = GenerationContext.for_target(
        project_name, template=template, verbose=verbose, cwd=cwd
    )
    result = await ProjectGenerator(config).generate(context)
    console.print(
        success_text(result.template, context.project_name, context.in_place),
        markup=False,
        highlight=False,
    )
    return 0


async def run_start(config: HelixConfig, cwd: Path | None = None) -> int:
    """Handle ``helix start``: guard the build output, then start."""
    root = Path(cwd) if cwd is not None else Path.cwd()
    print_step("Checking build artifacts...")
    status = await start_project(root, config)
    return status.returncode


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``helix`` console script."""
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)
    config = HelixConfig.from_env()

    if args.show_help or args.command is None:
        print_usage(config)
        sys.exit(0 if args.show_help else 1)

    if args.command not in COMMANDS:
        print_error(f"Unknown command: {args.command}")
        print_usage(config)
        sys.exit(1)

    try:
        if args.command == "create":
            code = asyncio.run(run_create(config, args.arguments, args.verbose))
        else:
            code = asyncio.run(run_start(config))
    except HelixError as exc:
        print_error(str(exc))
        if args.verbose:
            err_console.print_exception()
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
