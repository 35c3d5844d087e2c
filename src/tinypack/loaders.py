"""
Built-in Loaders.

Ready-made source transforms for `module.rules`. Each loader is a pure
`str -> str` function, usable directly or via an import string such as
`"tinypack.loaders:json_loader"` in TOML configuration.
"""

import json
from typing import Callable

BOM = "\ufeff"


def append_comment(text: str) -> Callable[[str], str]:
  """
  Creates a loader that appends a line comment to the source.

  Args:
      text (str): Comment text, without the leading '//'.

  Returns:
      Callable[[str], str]: The loader.
  """

  def loader(source: str) -> str:
    return f"{source}//{text}"

  loader.__name__ = f"append_comment({text!r})"
  return loader


def json_loader(source: str) -> str:
  """
  Turns a JSON document into a module exporting its value.

  Raises:
      ValueError: If the source is not valid JSON.
  """
  value = json.loads(source)
  return f"module.exports = {json.dumps(value, ensure_ascii=False)};\n"


def strip_bom(source: str) -> str:
  """Removes a leading UTF-8 byte order mark."""
  return source[1:] if source.startswith(BOM) else source
