"""
tinypack Package.

A deterministic module bundler for CommonJS-style JavaScript. Starting from
one or more entry files it builds the `require()` dependency graph, applies
loader transforms, groups modules into one chunk per entry, and emits
self-contained bundles with an embedded module registry and `require` shim.

Usage
-----

Simple Build
^^^^^^^^^^^^

.. code-block:: python

    import tinypack
    result = tinypack.bundle("src/index.js", output={"path": "dist"})
    print(list(result.stats.assets))
    # ['main.bundle.js']

Compiler with Plugins
^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from tinypack import BundlerConfig, create_compiler
    from tinypack.plugins import BuildTimerPlugin

    config = BundlerConfig(
      entry={"main": "src/index.js", "admin": "src/admin.js"},
      module={"rules": [{"test": r"\\.json$", "use": ["tinypack.loaders:json_loader"]}]},
      resolve={"extensions": [".js", ".json"]},
      plugins=[BuildTimerPlugin()],
    )
    compiler = create_compiler(config)
    result = compiler.run()
"""

from typing import Any, Dict, Optional, Union

from tinypack.config import BundlerConfig
from tinypack.core.compiler import Compilation, Compiler, create_compiler
from tinypack.core.models import BuildResult, BuildStats
from tinypack.errors import (
  BundleError,
  BundleIOError,
  ConfigError,
  LoaderError,
  ParseError,
  ResolutionError,
  UnsupportedDependencyError,
)

__version__ = "0.1.0"


def bundle(
  entry: Union[str, Dict[str, str]],
  output: Optional[Dict[str, Any]] = None,
  **options: Any,
) -> BuildResult:
  """
  Builds and writes bundles in one call.

  This is a convenience wrapper around `create_compiler(...).run()`.

  Args:
      entry (Union[str, Dict[str, str]]): Entry path or chunk name -> path mapping.
      output (dict, optional): `path` and `filename` options.
      **options: Any other `BundlerConfig` field (context, module, resolve, plugins).

  Returns:
      BuildResult: The build outcome.

  Raises:
      BundleError: If the build fails.
  """
  config: Dict[str, Any] = {"entry": entry, **options}
  if output is not None:
    config["output"] = output

  compiler = create_compiler(config)
  captured = {}

  def on_complete(error, stats, file_dependencies):
    captured["error"] = error

  result = compiler.run(on_complete)
  if captured.get("error") is not None:
    raise captured["error"]
  return result


__all__ = [
  "bundle",
  "BundlerConfig",
  "Compilation",
  "Compiler",
  "create_compiler",
  "BuildResult",
  "BuildStats",
  "BundleError",
  "BundleIOError",
  "ConfigError",
  "LoaderError",
  "ParseError",
  "ResolutionError",
  "UnsupportedDependencyError",
  "__version__",
]
