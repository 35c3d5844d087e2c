"""
Build Orchestration.

This module provides the `Compiler`, the long-lived driver that owns the
configuration and lifecycle hooks, and the `Compilation`, the state of a single
build invocation.

A build (`Compiler.run`) walks these phases:

1.  **Run**: the `run` hook fires.
2.  **Graph**: each entry is resolved and its module graph is built
    (`ModuleGraphBuilder`), applying loaders and rewriting `require()` ids.
3.  **Chunks**: modules are grouped per entry (`ChunkAssembler`).
4.  **Assets**: each chunk is rendered to a bundle (`RuntimeCodeGenerator`).
5.  **Write**: every asset is written to `output.path`.
6.  **Done**: the `done` hook fires.

The first failure moves the build to `FAILED` and skips every later phase.
Assets are only written once all of them rendered, so a failed build writes
nothing.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from tinypack.config import BundlerConfig
from tinypack.core.chunks import ChunkAssembler
from tinypack.core.extractor import DependencyExtractor
from tinypack.core.graph import ModuleGraphBuilder
from tinypack.core.hooks import HookRegistry, apply_plugins
from tinypack.core.js_ast import EsprimaCapability
from tinypack.core.loaders import LoaderPipeline
from tinypack.core.models import BuildResult, BuildStats, Chunk, Module
from tinypack.core.resolver import PathResolver, to_unix_path
from tinypack.core.runtime import RuntimeCodeGenerator
from tinypack.enums import BuildState, HookName
from tinypack.errors import BundleIOError, ConfigError

logger = logging.getLogger(__name__)

# (error, stats, file_dependencies)
BuildCallback = Callable[[Optional[BaseException], Optional[BuildStats], Optional[List[str]]], None]
StateListener = Callable[[BuildState], None]


class Compilation:
  """
  The modules, chunks and assets of one build.

  Created fresh for every build and discarded afterwards.
  """

  def __init__(self, config: BundlerConfig):
    self.config = config
    self.context = to_unix_path(str(config.context))
    self.chunks: List[Chunk] = []
    self.assets: Dict[str, str] = {}
    self.entry_modules: Dict[str, Module] = {}
    self._registry: Dict[str, Module] = {}
    self._file_dependencies: Dict[str, None] = {}

    extensions = config.resolve.extensions
    self.resolver = PathResolver(extensions)
    extractor = DependencyExtractor(
      self.context,
      extensions,
      ast_capability=EsprimaCapability(config.source_type),
      resolver=self.resolver,
    )
    self.builder = ModuleGraphBuilder(
      self.context,
      LoaderPipeline(config.module.rules),
      extractor,
      registry=self._registry,
      file_dependencies=self._file_dependencies,
    )

  @property
  def modules(self) -> List[Module]:
    """All modules, unique by id, in first-discovery order."""
    return list(self._registry.values())

  @property
  def file_dependencies(self) -> List[str]:
    """Every file path read by the build, in discovery order."""
    return list(self._file_dependencies)

  def build_graph(self) -> None:
    """Resolves every entry and builds its module subtree."""
    for name, entry_path in self.config.entries.items():
      path = self.resolver.resolve(self.context, entry_path)
      self._file_dependencies[path] = None
      self.entry_modules[name] = self.builder.build(name, path)

  def assemble_chunks(self) -> None:
    self.chunks = ChunkAssembler().assemble(self.entry_modules, self.modules)

  def render_assets(self) -> None:
    generator = RuntimeCodeGenerator()
    for chunk in self.chunks:
      filename = self.config.output.filename_for(chunk.name)
      self.assets[filename] = generator.render(chunk, self._registry)

  def build(self, on_state: Optional[StateListener] = None) -> BuildStats:
    """
    Runs the graph, chunk and render phases.

    Args:
        on_state (StateListener, optional): Notified after each completed phase.

    Returns:
        BuildStats: Chunks, modules and assets of the build.

    Raises:
        BundleError: On the first fatal failure.
    """
    notify = on_state or (lambda state: None)
    self.build_graph()
    notify(BuildState.GRAPH_BUILT)
    self.assemble_chunks()
    notify(BuildState.CHUNKS_ASSEMBLED)
    self.render_assets()
    notify(BuildState.ASSETS_RENDERED)
    return self.stats()

  def stats(self) -> BuildStats:
    return BuildStats(chunks=list(self.chunks), modules=self.modules, assets=dict(self.assets))


class Compiler:
  """
  Long-lived build driver.

  Attributes:
      config (BundlerConfig): Resolved configuration.
      hooks (HookRegistry): The `run` and `done` lifecycle hooks.
      state (BuildState): State of the most recent build.
  """

  def __init__(self, config: BundlerConfig):
    self.config = config
    self.hooks = HookRegistry()
    self.state = BuildState.IDLE

  def _set_state(self, state: BuildState) -> None:
    logger.debug("Build state: %s -> %s", self.state.value, state.value)
    self.state = state

  def compile(self, on_state: Optional[StateListener] = None) -> Compilation:
    """
    Builds a fresh compilation without writing assets or firing hooks.

    Returns:
        Compilation: The finished compilation.

    Raises:
        BundleError: On the first fatal failure.
    """
    compilation = Compilation(self.config)
    compilation.build(on_state=on_state)
    return compilation

  def emit_assets(self, assets: Dict[str, str]) -> List[str]:
    """
    Writes assets to the output directory, creating it if needed.

    Every asset is first written to a temporary file beside its target. Targets
    are only replaced once all temporary files exist, and a failure while
    replacing removes what was already moved into place, so a failed emit
    leaves no asset behind.

    Args:
        assets (Dict[str, str]): Filename -> code. Filenames may contain
            subdirectories (e.g. 'js/main.min.js').

    Returns:
        List[str]: Paths written.

    Raises:
        BundleIOError: If a directory or a file cannot be written.
    """
    out_dir = self.config.output_dir
    try:
      out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
      raise BundleIOError(f"Cannot create output directory: {e}", path=str(out_dir)) from e

    staged: List[Tuple[str, Path]] = []
    try:
      for filename, code in assets.items():
        target = out_dir / filename
        try:
          target.parent.mkdir(parents=True, exist_ok=True)
          with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="\n",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
          ) as f:
            staged.append((f.name, target))
            f.write(code)
        except OSError as e:
          raise BundleIOError(f"Cannot write asset: {e}", path=str(target)) from e
    except BundleIOError:
      _discard(tmp for tmp, _ in staged)
      raise

    written: List[str] = []
    for index, (tmp, target) in enumerate(staged):
      try:
        os.replace(tmp, target)
      except OSError as e:
        _discard([*written, *(pending for pending, _ in staged[index:])])
        raise BundleIOError(f"Cannot write asset: {e}", path=str(target)) from e
      written.append(str(target))

    logger.debug("Wrote %s", ", ".join(written))
    return written

  def run(self, callback: Optional[BuildCallback] = None) -> BuildResult:
    """
    Performs one complete build.

    Args:
        callback (BuildCallback, optional): Receives `(None, stats, file_dependencies)`
            on success or `(error, None, None)` on failure.

    Returns:
        BuildResult: Outcome of the build.
    """
    self.state = BuildState.IDLE
    try:
      self._set_state(BuildState.RUNNING)
      self.hooks.call(HookName.RUN)
      logger.info("Building %d entr%s", len(self.config.entries), "y" if len(self.config.entries) == 1 else "ies")

      compilation = self.compile(on_state=self._set_state)
      self.emit_assets(compilation.assets)
      self._set_state(BuildState.WRITTEN)

      self.hooks.call(HookName.DONE)
      self._set_state(BuildState.DONE)
    except Exception as e:
      self._set_state(BuildState.FAILED)
      logger.error("Build failed: %s", e)
      if callback:
        callback(e, None, None)
      return BuildResult(success=False, errors=[str(e)])

    stats = compilation.stats()
    file_dependencies = compilation.file_dependencies
    logger.info("Emitted %d asset(s) from %d module(s)", len(stats.assets), len(stats.modules))
    if callback:
      callback(None, stats, file_dependencies)
    return BuildResult(success=True, stats=stats, file_dependencies=file_dependencies)


def create_compiler(config: Union[BundlerConfig, Dict[str, Any]]) -> Compiler:
  """
  Creates a compiler and applies its configured plugins.

  Args:
      config (Union[BundlerConfig, Dict]): Configuration model or raw mapping.

  Returns:
      Compiler: Ready to `run()`.
  """
  if not isinstance(config, BundlerConfig):
    try:
      config = BundlerConfig.model_validate(config)
    except ValidationError as e:
      raise ConfigError(f"Invalid configuration: {e}") from e
  compiler = Compiler(config)
  apply_plugins(compiler, config.plugins)
  return compiler


def _discard(paths: Iterable[str]) -> None:
  """Removes partially emitted files, ignoring ones already gone."""
  for path in paths:
    try:
      os.unlink(path)
    except FileNotFoundError:
      continue
