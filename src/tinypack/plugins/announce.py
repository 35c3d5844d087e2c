"""
Plugins logging the start and end of every build.
"""

from tinypack.enums import HookName
from tinypack.utils.console import log_info, log_success


class RunAnnouncePlugin:
  """Logs a message when a build starts."""

  plugin_name = "RunAnnouncePlugin"

  def __init__(self, message: str = "Build started"):
    self.message = message

  def apply(self, compiler) -> None:
    compiler.hooks.tap(HookName.RUN, lambda: log_info(f"{self.plugin_name}: {self.message}"), self.plugin_name)


class DoneAnnouncePlugin:
  """Logs a message after a successful build wrote its assets."""

  plugin_name = "DoneAnnouncePlugin"

  def __init__(self, message: str = "Build finished"):
    self.message = message

  def apply(self, compiler) -> None:
    compiler.hooks.tap(HookName.DONE, lambda: log_success(f"{self.plugin_name}: {self.message}"), self.plugin_name)
