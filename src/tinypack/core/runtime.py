"""
Runtime Bundle Generation.

Renders a chunk into a single self-executing JavaScript program:

1.  `modules`: a registry mapping each module id to a wrapper
    `(module, exports, require) => { ... }` around its transformed source.
2.  `cache`: the require cache, keyed by module id.
3.  `require(moduleId)`: returns cached exports, or creates the module record,
    caches it *before* running the wrapper (so circular requires observe the
    partially populated exports), runs the wrapper and returns its exports.
4.  The entry module's body, inlined with a fresh top-level `exports`.

Module sources are emitted verbatim (never re-indented) so that multi-line
string and template literals keep their exact contents. The output references
module ids only, never filesystem paths.
"""

import json
from typing import Dict, List

from tinypack.core.models import Chunk, Module

_PROLOGUE = "(() => {\n  var modules = {"

_REQUIRE_FUNCTION = """\
  };
  var cache = {};
  function require(moduleId) {
    if (cache[moduleId] !== undefined) return cache[moduleId].exports;
    var module = (cache[moduleId] = { exports: {} });
    modules[moduleId](module, module.exports, require);
    return module.exports;
  }
  var exports = {};
  var module = { exports: exports };"""

_EPILOGUE = "})();\n"


class RuntimeCodeGenerator:
  """
  Produces the bundle text for a chunk.
  """

  def render(self, chunk: Chunk, modules_by_id: Dict[str, Module]) -> str:
    """
    Renders the chunk.

    Args:
        chunk (Chunk): The chunk to render.
        modules_by_id (Dict[str, Module]): Lookup for the chunk's modules.

    Returns:
        str: The bundle source.
    """
    lines: List[str] = [_PROLOGUE]
    for index, module_id in enumerate(chunk.module_ids):
      body = modules_by_id[module_id].transformed_source.rstrip()
      separator = "," if index < len(chunk.module_ids) - 1 else ""
      lines.append(f"    {json.dumps(module_id)}: (module, exports, require) => {{")
      lines.append(body)
      lines.append(f"    }}{separator}")

    lines.append(_REQUIRE_FUNCTION)
    lines.append(modules_by_id[chunk.entry_module_id].transformed_source.rstrip())
    lines.append(_EPILOGUE)
    return "\n".join(lines)
