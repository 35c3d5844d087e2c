"""
Main Entry Point for tinypack CLI.

This module handles argument parsing and dispatches to the command handlers in
`tinypack.cli.handlers`.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tinypack import __version__
from tinypack.cli.handlers.build import handle_build
from tinypack.cli.handlers.graph import handle_graph
from tinypack.config import parse_cli_key_values
from tinypack.errors import ConfigError
from tinypack.utils.console import log_error, set_log_level


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
  """Registers the configuration flags shared by every command."""
  parser.add_argument("--config", type=Path, default=None, help="TOML config file (default: nearest pyproject.toml)")
  parser.add_argument("--context", type=Path, default=None, help="Build root for module ids and entry paths")
  parser.add_argument(
    "--entry",
    nargs="+",
    default=None,
    help="Entries as PATH or NAME=PATH (e.g. main=src/index.js admin=src/admin.js)",
  )
  parser.add_argument("--ext", nargs="+", default=None, help="Resolution extensions in order (default: .js)")
  parser.add_argument(
    "--plugin",
    nargs="+",
    default=None,
    help="Plugin classes as import strings (e.g. tinypack.plugins:BuildTimerPlugin)",
  )
  parser.add_argument(
    "--set",
    nargs="*",
    dest="settings",
    help="Extra config values in key=value format, dotted keys allowed (e.g. output.filename=[name].js)",
  )
  parser.add_argument("--json", action="store_true", help="Print machine-readable stats instead of tables")
  parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="tinypack: Deterministic JavaScript module bundler")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: BUILD ---
  cmd_build = subparsers.add_parser("build", help="Bundle entries and write assets")
  _add_config_arguments(cmd_build)
  cmd_build.add_argument("--out", type=Path, default=None, help="Output directory (default: dist)")
  cmd_build.add_argument("--filename", default=None, help="Asset filename pattern containing [name]")

  # --- Command: GRAPH ---
  cmd_graph = subparsers.add_parser("graph", help="Build the module graph and print it without writing")
  _add_config_arguments(cmd_graph)

  args = parser.parse_args(argv)
  if args.json:
    set_log_level(logging.WARNING)
  elif args.verbose:
    set_log_level(logging.DEBUG)
  else:
    set_log_level(logging.INFO)

  try:
    settings = parse_cli_key_values(args.settings)
  except ConfigError as e:
    log_error(str(e))
    return 2

  common = {
    "config_path": args.config,
    "context": args.context,
    "entries": args.entry,
    "extensions": args.ext,
    "plugins": args.plugin,
    "settings": settings,
    "json_mode": args.json,
  }

  if args.command == "build":
    return handle_build(out=args.out, filename=args.filename, **common)

  elif args.command == "graph":
    return handle_graph(**common)

  return 0


if __name__ == "__main__":
  sys.exit(main())
