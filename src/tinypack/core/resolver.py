"""
Specifier Resolution.

Maps a raw `require()` specifier plus the requiring module's directory to an
absolute file path, and derives the root-relative module id used as the
deduplication key of the module graph.

All paths handled here are POSIX-style strings so that module ids are stable
across platforms.
"""

import logging
import os
import posixpath
from typing import Optional, Sequence

from tinypack.errors import ResolutionError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js",)


def to_unix_path(path: str) -> str:
  """Replaces backslashes with forward slashes."""
  return str(path).replace("\\", "/")


def module_id_for(context: str, absolute_path: str) -> str:
  """
  Computes the module id of a file.

  Args:
      context (str): Build root directory.
      absolute_path (str): Resolved file path.

  Returns:
      str: './' followed by the POSIX path relative to `context`.
  """
  rel = posixpath.relpath(to_unix_path(absolute_path), to_unix_path(context))
  return "./" + rel


class PathResolver:
  """
  Resolves specifiers against the filesystem, trying configured extensions.
  """

  def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS):
    self.extensions = list(extensions)

  def resolve(self, base_path: str, specifier: str, extensions: Optional[Sequence[str]] = None) -> str:
    """
    Finds the file a specifier refers to.

    The verbatim candidate `base_path/specifier` wins if it is a file;
    otherwise each extension is appended in order and the first existing file
    is returned.

    Args:
        base_path (str): Directory of the requiring module.
        specifier (str): Raw specifier, e.g. './math'.
        extensions (Sequence[str], optional): Overrides the resolver's list.

    Returns:
        str: Normalised absolute POSIX path.

    Raises:
        ResolutionError: If no candidate exists.
    """
    exts = self.extensions if extensions is None else list(extensions)
    candidate = posixpath.normpath(posixpath.join(to_unix_path(base_path), to_unix_path(specifier)))

    tried = [candidate]
    if os.path.isfile(candidate):
      return candidate

    for ext in exts:
      with_ext = candidate + ext
      tried.append(with_ext)
      if os.path.isfile(with_ext):
        logger.debug("Resolved %s -> %s", specifier, with_ext)
        return with_ext

    raise ResolutionError(specifier, base_path, tried=tried)
