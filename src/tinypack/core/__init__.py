"""
Core bundling engine: resolution, loaders, graph, chunks, runtime and hooks.
"""

from tinypack.core.compiler import Compilation, Compiler, create_compiler
from tinypack.core.hooks import HookRegistry, Pluggable, SyncHook
from tinypack.core.models import BuildResult, BuildStats, Chunk, Dependency, Module

__all__ = [
  "Compilation",
  "Compiler",
  "create_compiler",
  "HookRegistry",
  "Pluggable",
  "SyncHook",
  "BuildResult",
  "BuildStats",
  "Chunk",
  "Dependency",
  "Module",
]
