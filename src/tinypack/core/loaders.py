"""
Loader Pipeline.

Applies the transforms of every matching `module.rules` entry to a module's
raw source before it is parsed.

Ordering:
    Transforms are collected in declaration order (rule order, then each rule's
    `use` order) and applied right to left. Given `use: [a, b]`, the source
    flows through `b` first and `a` last, i.e. the result is `a(b(source))`.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from tinypack.config import ModuleRule
from tinypack.errors import LoaderError

logger = logging.getLogger(__name__)

Transform = Callable[[str], str]


def _loader_name(loader: Transform) -> str:
  return getattr(loader, "__name__", None) or type(loader).__name__


class LoaderPipeline:
  """
  Selects and runs loader transforms for a module.
  """

  def __init__(self, rules: Sequence[ModuleRule]):
    self.rules = list(rules)

  def collect(self, module_path: str) -> List[Tuple[int, Transform]]:
    """
    Lists the transforms that apply to a path, in declaration order.

    Args:
        module_path (str): Absolute POSIX path of the module.

    Returns:
        List[Tuple[int, Transform]]: (rule index, transform) pairs.
    """
    selected = []
    for index, rule in enumerate(self.rules):
      if rule.matches(module_path):
        selected.extend((index, loader) for loader in rule.use)
    return selected

  def apply(self, module_path: str, source: str, module_id: Optional[str] = None) -> str:
    """
    Runs the matching transforms right to left over the source.

    Args:
        module_path (str): Absolute POSIX path of the module.
        source (str): Raw source text.
        module_id (str, optional): Module id, used for error context.

    Returns:
        str: Transformed source.

    Raises:
        LoaderError: If a transform raises or returns a non-string.
    """
    code = source
    for rule_index, loader in reversed(self.collect(module_path)):
      name = _loader_name(loader)
      try:
        result = loader(code)
      except Exception as e:
        raise LoaderError(str(e), rule_index, name, module_id=module_id, path=module_path) from e
      if not isinstance(result, str):
        raise LoaderError(
          f"expected str, got {type(result).__name__}",
          rule_index,
          name,
          module_id=module_id,
          path=module_path,
        )
      logger.debug("Loader %s applied to %s", name, module_id or module_path)
      code = result
    return code
