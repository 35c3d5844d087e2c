"""
Dependency Extraction.

Finds the `require("...")` calls of a module, resolves each specifier to a
module id, and rewrites the call argument to that id so the generated runtime
can look modules up by id.
"""

import logging
import posixpath
from typing import Dict, Optional, Sequence

from tinypack.core.js_ast import DependencyCall, EsprimaCapability
from tinypack.core.models import Dependency, Module
from tinypack.core.resolver import PathResolver, module_id_for
from tinypack.errors import ResolutionError, UnsupportedDependencyError

logger = logging.getLogger(__name__)


class DependencyExtractor:
  """
  Resolves and rewrites the dependency requests of one module at a time.

  Attributes:
      context (str): Build root used to compute module ids.
      extensions (Sequence[str]): Extensions tried by the resolver.
  """

  def __init__(
    self,
    context: str,
    extensions: Sequence[str],
    ast_capability: Optional[EsprimaCapability] = None,
    resolver: Optional[PathResolver] = None,
  ):
    self.context = context
    self.extensions = list(extensions)
    self.ast_capability = ast_capability or EsprimaCapability()
    self.resolver = resolver or PathResolver(self.extensions)

  def extract(self, module: Module, source: str, file_dependencies: Dict[str, None]) -> Module:
    """
    Populates `module.dependencies` and `module.transformed_source`.

    Args:
        module (Module): The module being built; its `absolute_path` anchors resolution.
        source (str): Loader output for the module.
        file_dependencies (Dict[str, None]): Ordered set of files read by the build;
            each resolved dependency path is added.

    Returns:
        Module: The same module, updated in place.

    Raises:
        ParseError: If the source cannot be parsed.
        UnsupportedDependencyError: For require() calls without a single string literal.
        ResolutionError: If a specifier does not resolve to a file.
    """
    ast = self.ast_capability.parse(source, module_id=module.id)
    base_dir = posixpath.dirname(module.absolute_path)

    def on_call(call: DependencyCall) -> None:
      specifier = call.specifier
      if specifier is None:
        raise UnsupportedDependencyError(
          f"require() needs exactly one string literal argument, got {call.describe_argument()} at line {call.line}",
          module_id=module.id,
          path=module.absolute_path,
        )

      try:
        resolved_path = self.resolver.resolve(base_dir, specifier, self.extensions)
      except ResolutionError as e:
        e.module_id = module.id
        raise

      resolved_id = module_id_for(self.context, resolved_path)
      call.rewrite(resolved_id)
      module.dependencies.append(Dependency(specifier=specifier, resolved_id=resolved_id, resolved_path=resolved_path))
      file_dependencies[resolved_path] = None
      logger.debug("%s: '%s' -> %s", module.id, specifier, resolved_id)

    self.ast_capability.visit_dependency_calls(ast, on_call)
    module.transformed_source = self.ast_capability.render(ast)
    return module
