#!/usr/bin/env python3
"""Add-on scripts CLI.

Usage:
    addon-scripts start [--use "npx webpack"] [--hostname localhost] [--port 5241]
    addon-scripts build [--use "npx webpack"]
    addon-scripts clean
    addon-scripts package [--no-rebuild]
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Environment must be loaded before devserver.constants reads it
load_dotenv()

from pydantic import BaseModel, ValidationError
from rich.console import Console

from devserver.models.options import BuildCommandOptions, PackageCommandOptions, StartCommandOptions
from devserver.services.commands import create_executors

logger = logging.getLogger(__name__)

console = Console(stderr=True)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(verbose: bool = False) -> None:
    log_level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO), format=LOG_FORMAT)


def parse_options(model: type, args: argparse.Namespace, *fields: str) -> BaseModel:
    """Build command options from parsed arguments, exiting with status 1 when invalid.

    Arguments left unset fall back to the option model's defaults.
    """
    values = {name: getattr(args, name) for name in fields if getattr(args, name, None) is not None}
    try:
        return model(**values)
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "options"
            console.print(f"[red]Invalid {field}:[/red] {error['msg']}")
        sys.exit(1)


BUILD_FIELDS = ("src_directory", "output_directory", "transpiler", "verbose")


def cmd_clean(args):
    """Recreate the output directory."""
    options = parse_options(BuildCommandOptions, args, "output_directory", "verbose")
    executors = create_executors(Path.cwd(), options.output_directory)
    asyncio.run(executors["clean"].execute(options.output_directory))


def cmd_build(args):
    """Build the add-on into the output directory."""
    options = parse_options(BuildCommandOptions, args, *BUILD_FIELDS)
    executors = create_executors(Path.cwd(), options.output_directory)
    if not asyncio.run(executors["build"].execute(options)):
        sys.exit(1)


def cmd_package(args):
    """Zip the built add-on."""
    options = parse_options(PackageCommandOptions, args, *BUILD_FIELDS, "should_rebuild")
    executors = create_executors(Path.cwd(), options.output_directory)
    if not asyncio.run(executors["package"].execute(options)):
        sys.exit(1)


def cmd_start(args):
    """Build the add-on, serve it and rebuild on every source change."""
    options = parse_options(
        StartCommandOptions, args, *BUILD_FIELDS, "hostname", "port", "ssl_certfile", "ssl_keyfile"
    )
    executors = create_executors(Path.cwd(), options.output_directory)
    try:
        asyncio.run(executors["start"].execute(options))
    except KeyboardInterrupt:
        console.print("Server stopped.")


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--src", dest="src_directory", help="Source directory of the add-on")
    parser.add_argument("--output", dest="output_directory", help="Build output directory")
    parser.add_argument("--use", dest="transpiler", help="Transpiler command, e.g. \"npx webpack\"")
    parser.add_argument("--verbose", action="store_true", default=None, help="Print debug logs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="addon-scripts", description="Add-on development scripts")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # start
    start_parser = subparsers.add_parser("start", help="Build, serve and watch the add-on")
    _add_build_arguments(start_parser)
    start_parser.add_argument("--hostname", help="Host the server binds to")
    start_parser.add_argument("--port", type=int, help="Port the server listens on")
    start_parser.add_argument("--ssl-cert", dest="ssl_certfile", help="TLS certificate file")
    start_parser.add_argument("--ssl-key", dest="ssl_keyfile", help="TLS private key file")

    # build
    build_parser_ = subparsers.add_parser("build", help="Build the add-on")
    _add_build_arguments(build_parser_)

    # clean
    clean_parser = subparsers.add_parser("clean", help="Clean the output directory")
    clean_parser.add_argument("--output", dest="output_directory", help="Build output directory")
    clean_parser.add_argument("--verbose", action="store_true", default=None, help="Print debug logs")

    # package
    package_parser = subparsers.add_parser("package", help="Zip the built add-on")
    _add_build_arguments(package_parser)
    package_parser.add_argument(
        "--no-rebuild", dest="should_rebuild", action="store_false", default=None,
        help="Package the existing output without rebuilding",
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(bool(getattr(args, "verbose", False)))

    commands = {
        "start": cmd_start,
        "build": cmd_build,
        "clean": cmd_clean,
        "package": cmd_package,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
