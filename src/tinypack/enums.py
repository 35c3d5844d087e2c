"""
Enumerations for tinypack.

This module defines the enumerations shared by the compiler, the hook
registry, and the parser adapter.
"""

from enum import Enum


class BuildState(str, Enum):
  """
  Lifecycle states of a single build invocation.

  A build walks these states in declaration order and may jump to `FAILED`
  from any of them on the first fatal error.
  """

  IDLE = "idle"
  RUNNING = "running"  # `run` hook fired
  GRAPH_BUILT = "graph_built"
  CHUNKS_ASSEMBLED = "chunks_assembled"
  ASSETS_RENDERED = "assets_rendered"
  WRITTEN = "written"
  DONE = "done"  # `done` hook fired
  FAILED = "failed"


class HookName(str, Enum):
  """
  The lifecycle events plugins may tap.
  """

  RUN = "run"
  DONE = "done"


class SourceType(str, Enum):
  """
  Parsing goal handed to the JavaScript parser.
  """

  SCRIPT = "script"
  MODULE = "module"
