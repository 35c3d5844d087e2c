"""
Chunk Assembly: one chunk per configured entry.
"""

from typing import Dict, Iterable, List

from tinypack.core.models import Chunk, Module


class ChunkAssembler:
  """
  Groups built modules by the entry chunks they belong to.
  """

  def assemble(self, entry_modules: Dict[str, Module], modules: Iterable[Module]) -> List[Chunk]:
    """
    Materialises chunks.

    Args:
        entry_modules (Dict[str, Module]): Chunk name -> entry module, in configuration order.
        modules (Iterable[Module]): All modules of the compilation, in first-discovery order.

    Returns:
        List[Chunk]: One chunk per entry, listing member module ids in discovery order.
    """
    modules = list(modules)
    chunks = []
    for name, entry_module in entry_modules.items():
      member_ids = [m.id for m in modules if name in m.chunk_names]
      chunks.append(Chunk(name=name, entry_module_id=entry_module.id, module_ids=member_ids))
    return chunks
