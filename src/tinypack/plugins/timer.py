"""
Build duration measurement.
"""

import time
from typing import Optional

from tinypack.enums import HookName
from tinypack.utils.console import log_info


class BuildTimerPlugin:
  """
  Measures wall-clock time between the `run` and `done` hooks.

  Attributes:
      last_duration (Optional[float]): Seconds taken by the last successful build.
  """

  plugin_name = "BuildTimerPlugin"

  def __init__(self, report: bool = True):
    self.report = report
    self.last_duration: Optional[float] = None
    self._started: Optional[float] = None

  def apply(self, compiler) -> None:
    compiler.hooks.tap(HookName.RUN, self._on_run, self.plugin_name)
    compiler.hooks.tap(HookName.DONE, self._on_done, self.plugin_name)

  def _on_run(self) -> None:
    self._started = time.perf_counter()

  def _on_done(self) -> None:
    if self._started is None:
      return
    self.last_duration = time.perf_counter() - self._started
    self._started = None
    if self.report:
      log_info(f"Build completed in {self.last_duration:.3f}s")
