"""
Error Taxonomy for tinypack Builds.

Every failure that can occur while bundling derives from `BundleError`.
All of them are fatal: a build either produces every asset or none.

Each error carries enough context (the module id being processed and the
offending path) to diagnose the failure without re-running the build.
"""

from typing import List, Optional


class BundleError(Exception):
  """
  Base class for all build failures.

  Attributes:
      module_id (Optional[str]): Id of the module being processed, if known.
      path (Optional[str]): Filesystem path involved in the failure, if any.
  """

  def __init__(self, message: str, module_id: Optional[str] = None, path: Optional[str] = None):
    super().__init__(message)
    self.message = message
    self.module_id = module_id
    self.path = path

  def __str__(self) -> str:
    parts = [self.message]
    if self.module_id:
      parts.append(f"(module: {self.module_id})")
    if self.path:
      parts.append(f"(path: {self.path})")
    return " ".join(parts)


class ConfigError(BundleError):
  """Raised when the bundler configuration is invalid or cannot be loaded."""


class ResolutionError(BundleError):
  """
  Raised when a dependency specifier cannot be resolved to an existing file.

  Attributes:
      specifier (str): The raw specifier as written in the source.
      tried (List[str]): Every candidate path that was checked, in order.
  """

  def __init__(
    self,
    specifier: str,
    base_path: str,
    tried: Optional[List[str]] = None,
    module_id: Optional[str] = None,
  ):
    self.specifier = specifier
    self.tried = list(tried or [])
    super().__init__(f"Cannot resolve '{specifier}' from '{base_path}'", module_id=module_id, path=base_path)


class LoaderError(BundleError):
  """
  Raised when a loader transform throws or returns a non-string value.

  Attributes:
      rule_index (int): Position of the matching rule in `module.rules`.
      loader_name (str): Name of the failing transform callable.
  """

  def __init__(
    self,
    message: str,
    rule_index: int,
    loader_name: str,
    module_id: Optional[str] = None,
    path: Optional[str] = None,
  ):
    self.rule_index = rule_index
    self.loader_name = loader_name
    super().__init__(f"Loader '{loader_name}' (rule #{rule_index}) failed: {message}", module_id=module_id, path=path)


class ParseError(BundleError):
  """Raised when the (transformed) module source is not valid JavaScript."""


class UnsupportedDependencyError(BundleError):
  """Raised for `require(...)` calls whose argument is not a single string literal."""


class BundleIOError(BundleError):
  """Raised when reading a module or writing an asset fails."""
