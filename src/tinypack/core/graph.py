"""
Module Graph Construction.

Builds the dependency graph of a compilation by walking `require()` edges from
each entry module.

Deduplication:
    Modules are keyed by id in a single-writer registry. A module is registered
    before its dependencies are walked, so each id is read, transformed and
    dependency-extracted at most once per build, and circular requires
    terminate.

Chunk membership:
    Every module reached from an entry carries that entry's name. When an
    already-built module is reached from a new entry, the name is propagated
    through its known dependency subtree without rebuilding anything.
"""

import logging
import posixpath
from typing import Dict, Optional

from tinypack.core.extractor import DependencyExtractor
from tinypack.core.loaders import LoaderPipeline
from tinypack.core.models import Module
from tinypack.core.resolver import module_id_for, to_unix_path
from tinypack.errors import BundleIOError

logger = logging.getLogger(__name__)


class ModuleGraphBuilder:
  """
  Recursively builds modules into a shared registry.

  Attributes:
      registry (Dict[str, Module]): Module id -> module, in first-discovery order.
      file_dependencies (Dict[str, None]): Ordered set of every file path the build read.
  """

  def __init__(
    self,
    context: str,
    pipeline: LoaderPipeline,
    extractor: DependencyExtractor,
    registry: Optional[Dict[str, Module]] = None,
    file_dependencies: Optional[Dict[str, None]] = None,
    encoding: str = "utf-8",
  ):
    self.context = to_unix_path(context)
    self.pipeline = pipeline
    self.extractor = extractor
    self.registry = registry if registry is not None else {}
    self.file_dependencies = file_dependencies if file_dependencies is not None else {}
    self.encoding = encoding

  def build(self, entry_name: str, absolute_path: str) -> Module:
    """
    Builds a module and, recursively, everything it requires.

    Args:
        entry_name (str): Chunk the module is being built for.
        absolute_path (str): Path of the module's source file.

    Returns:
        Module: The new module, or the existing one if the id was already built.

    Raises:
        BundleError: Any failure in this module or its dependency subtree.
    """
    path = posixpath.normpath(to_unix_path(absolute_path))
    module_id = module_id_for(self.context, path)

    existing = self.registry.get(module_id)
    if existing is not None:
      self._propagate_chunk_name(existing, entry_name)
      return existing

    raw_source = self._read(path, module_id)
    module = Module(id=module_id, absolute_path=path, chunk_names=[entry_name])
    source = self.pipeline.apply(path, raw_source, module_id=module_id)
    self.extractor.extract(module, source, self.file_dependencies)

    self.registry[module_id] = module
    logger.debug("Built %s (%d dependencies)", module_id, len(module.dependencies))

    for dep in module.dependencies:
      self.build(entry_name, dep.resolved_path)

    return module

  def _propagate_chunk_name(self, module: Module, entry_name: str) -> None:
    pending = [module]
    while pending:
      current = pending.pop()
      if not current.add_chunk_name(entry_name):
        continue
      for dep in current.dependencies:
        dep_module = self.registry.get(dep.resolved_id)
        if dep_module is not None:
          pending.append(dep_module)

  def _read(self, path: str, module_id: str) -> str:
    try:
      with open(path, "r", encoding=self.encoding) as f:
        return f.read()
    except (OSError, UnicodeDecodeError) as e:
      raise BundleIOError(f"Cannot read module source: {e}", module_id=module_id, path=path) from e
