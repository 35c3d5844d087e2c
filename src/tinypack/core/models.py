"""
Data structures produced by a build.

This module defines the Pydantic models exchanged between the build phases:
`Module` (one per discovered source file), `Dependency` (one per `require`
call), `Chunk` (one per entry) and `BuildStats` / `BuildResult` (the outcome
reported to callers).
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Dependency(BaseModel):
  """
  A single resolved `require(...)` edge.
  """

  specifier: str = Field(..., description="The specifier exactly as written in the source.")
  resolved_id: str = Field(..., description="Module id the specifier resolved to.")
  resolved_path: str = Field(..., description="Absolute POSIX path of the dependency.")


class Module(BaseModel):
  """
  A source file discovered during graph construction.

  `chunk_names` behaves as an insertion-ordered set: names are only ever
  appended, never removed, and never duplicated.
  """

  id: str = Field(..., description="Root-relative module id, e.g. './src/a.js'.")
  absolute_path: str = Field(..., description="Absolute POSIX path of the source file.")
  chunk_names: List[str] = Field(default_factory=list, description="Entry chunks this module belongs to.")
  dependencies: List[Dependency] = Field(default_factory=list, description="Resolved dependencies in source order.")
  transformed_source: str = Field(default="", description="Loader output with require() ids rewritten.")

  def add_chunk_name(self, name: str) -> bool:
    """
    Records membership in a chunk.

    Args:
        name (str): The entry chunk name.

    Returns:
        bool: True if the name was new for this module.
    """
    if name in self.chunk_names:
      return False
    self.chunk_names.append(name)
    return True


class Chunk(BaseModel):
  """
  The set of modules reachable from one entry point.
  """

  name: str
  entry_module_id: str
  module_ids: List[str] = Field(default_factory=list)


class BuildStats(BaseModel):
  """
  Summary of a successful build.
  """

  chunks: List[Chunk] = Field(default_factory=list)
  modules: List[Module] = Field(default_factory=list)
  assets: Dict[str, str] = Field(default_factory=dict, description="Asset filename -> generated code.")

  def to_dict(self) -> Dict[str, Any]:
    """
    JSON-ready view of the stats without the (potentially large) module sources.

    Returns:
        Dict[str, Any]: Chunks, module graph and asset sizes.
    """
    return {
      "chunks": [c.model_dump() for c in self.chunks],
      "modules": [
        {
          "id": m.id,
          "chunk_names": list(m.chunk_names),
          "dependencies": [d.resolved_id for d in m.dependencies],
        }
        for m in self.modules
      ],
      "assets": {name: len(code) for name, code in self.assets.items()},
    }


class BuildResult(BaseModel):
  """
  Outcome of `Compiler.run`.
  """

  success: bool = Field(default=True, description="True if every asset was rendered and written.")
  stats: Optional[BuildStats] = None
  file_dependencies: Optional[List[str]] = None
  errors: List[str] = Field(default_factory=list)

  @property
  def has_errors(self) -> bool:
    """
    Returns True if any errors were recorded.
    """
    return len(self.errors) > 0
