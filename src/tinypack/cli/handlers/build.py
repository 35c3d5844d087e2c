"""
Build Command Handler.

This module implements the logic for the `tinypack build` command:
1. Configuration loading (TOML + CLI overrides).
2. Compiler creation and plugin application.
3. Running the build and writing assets.
4. Summary output (table or JSON).
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.table import Table

from tinypack.config import DEFAULT_CHUNK_NAME, BundlerConfig
from tinypack.core.compiler import create_compiler
from tinypack.core.models import BuildStats
from tinypack.errors import ConfigError
from tinypack.utils.console import console, log_error, log_success


def parse_entries(items: Optional[List[str]]) -> Optional[Dict[str, str]]:
  """
  Parses CLI entries of the form 'PATH' or 'NAME=PATH'.

  A bare path is named after the default chunk ('main').

  Args:
      items (Optional[List[str]]): Raw CLI values.

  Returns:
      Optional[Dict[str, str]]: Chunk name -> path, or None when no entries were given.

  Raises:
      ConfigError: On duplicate chunk names.
  """
  if not items:
    return None
  entries: Dict[str, str] = {}
  for item in items:
    name, sep, path = item.partition("=")
    if not sep:
      name, path = DEFAULT_CHUNK_NAME, item
    name = name.strip()
    if name in entries:
      raise ConfigError(f"Duplicate entry name '{name}'")
    entries[name] = path.strip()
  return entries


def load_cli_config(
  config_path: Optional[Path],
  context: Optional[Path],
  entries: Optional[List[str]],
  extensions: Optional[List[str]],
  plugins: Optional[List[str]],
  settings: Dict[str, Any],
  extra: Optional[Dict[str, Any]] = None,
) -> BundlerConfig:
  """
  Resolves the configuration for a CLI command.

  Returns:
      BundlerConfig: TOML settings overridden by CLI flags.

  Raises:
      ConfigError: If the configuration is invalid.
  """
  flags: Dict[str, Any] = {
    "entry": parse_entries(entries),
    "resolve.extensions": extensions,
    "plugins": plugins,
    "context": str(context.resolve()) if context is not None else None,
  }
  flags.update(extra or {})

  # Explicit flags win over --set values; unset flags leave them alone
  overrides: Dict[str, Any] = dict(settings)
  overrides.update({key: value for key, value in flags.items() if value is not None})

  search_path = context or Path.cwd()
  return BundlerConfig.load(config_path=config_path, search_path=search_path, **overrides)


def handle_build(
  config_path: Optional[Path],
  context: Optional[Path],
  entries: Optional[List[str]],
  extensions: Optional[List[str]],
  plugins: Optional[List[str]],
  settings: Dict[str, Any],
  json_mode: bool = False,
  out: Optional[Path] = None,
  filename: Optional[str] = None,
) -> int:
  """
  Handles the 'build' command execution.

  Args:
      config_path: Explicit TOML config file.
      context: Build root override.
      entries: Raw entry values ('PATH' or 'NAME=PATH').
      extensions: Resolution extensions override.
      plugins: Plugin import strings override.
      settings: Dotted key=value overrides.
      json_mode: If True, print stats as JSON.
      out: Output directory override.
      filename: Asset filename pattern override.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  extra = {"output.path": str(out.resolve()) if out is not None else None, "output.filename": filename}
  try:
    config = load_cli_config(config_path, context, entries, extensions, plugins, settings, extra)
    compiler = create_compiler(config)
  except ConfigError as e:
    log_error(str(e))
    return 1

  result = compiler.run()
  if not result.success:
    for err in result.errors:
      log_error(err)
    return 1

  if json_mode:
    print(json.dumps(result.stats.to_dict(), indent=2))
  else:
    _print_asset_summary(result.stats, config.output_dir)
    log_success(f"Wrote {len(result.stats.assets)} asset(s) to {config.output_dir}")
  return 0


def _print_asset_summary(stats: BuildStats, out_dir: Path) -> None:
  """
  Renders a table of emitted assets.

  Args:
      stats: Stats of the finished build.
      out_dir: Directory the assets were written to.
  """
  table = Table(title="Assets")
  table.add_column("Chunk", style="bold magenta")
  table.add_column("File", style="bold blue")
  table.add_column("Modules", justify="right")
  table.add_column("Size", justify="right")

  asset_names = list(stats.assets)
  for chunk, name in zip(stats.chunks, asset_names):
    table.add_row(chunk.name, str(out_dir / name), str(len(chunk.module_ids)), f"{len(stats.assets[name])} B")

  console.print(table)
