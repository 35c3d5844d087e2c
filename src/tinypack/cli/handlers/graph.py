"""
Graph Command Handler.

Builds the module graph (loaders, resolution, chunks and rendering included)
without writing assets or firing lifecycle hooks, and prints it.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.table import Table

from tinypack.cli.handlers.build import load_cli_config
from tinypack.core.compiler import Compiler
from tinypack.errors import BundleError
from tinypack.utils.console import console, log_error


def handle_graph(
  config_path: Optional[Path],
  context: Optional[Path],
  entries: Optional[List[str]],
  extensions: Optional[List[str]],
  plugins: Optional[List[str]],
  settings: Dict[str, Any],
  json_mode: bool = False,
) -> int:
  """
  Handles the 'graph' command execution.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  try:
    config = load_cli_config(config_path, context, entries, extensions, plugins, settings)
    compilation = Compiler(config).compile()
  except BundleError as e:
    log_error(str(e))
    return 1

  stats = compilation.stats()
  if json_mode:
    print(json.dumps(stats.to_dict(), indent=2))
    return 0

  table = Table(title="Module Graph")
  table.add_column("Module", style="bold blue")
  table.add_column("Chunks", style="bold magenta")
  table.add_column("Dependencies")

  for module in stats.modules:
    deps = ", ".join(d.resolved_id for d in module.dependencies) or "-"
    table.add_row(module.id, ", ".join(module.chunk_names), deps)

  console.print(table)
  return 0
