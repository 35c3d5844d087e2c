"""
Lifecycle Hooks and Plugin Host.

This module provides the infrastructure for extending tinypack via plugins.

A plugin is any object implementing the `Pluggable` protocol: it exposes
`apply(compiler)`, which is called once per compiler before any build runs
and typically taps callbacks onto the compiler's hooks:

.. code-block:: python

    class AnnouncePlugin:
      def apply(self, compiler):
        compiler.hooks.tap("done", lambda: print("bundled!"), plugin_name="Announce")

Hooks are owned by one `Compiler` instance; there is no process-wide registry.
Callbacks run synchronously, in registration order, and the first exception
aborts the remaining callbacks and propagates to the caller.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from tinypack.enums import HookName

logger = logging.getLogger(__name__)

HookCallback = Callable[[], Any]


@runtime_checkable
class Pluggable(Protocol):
  """Capability interface of a plugin."""

  def apply(self, compiler: Any) -> None: ...


class SyncHook:
  """
  An ordered list of zero-argument callbacks.
  """

  def __init__(self, name: str):
    self.name = name
    self._taps: List[Tuple[str, HookCallback]] = []

  def tap(self, callback: HookCallback, plugin_name: Optional[str] = None) -> None:
    """
    Appends a callback.

    Args:
        callback (HookCallback): Invoked with no arguments when the hook fires.
        plugin_name (str, optional): Label used in logs.
    """
    if not callable(callback):
      raise TypeError(f"Hook '{self.name}' callback must be callable, got {callback!r}")
    label = plugin_name or getattr(callback, "__qualname__", repr(callback))
    self._taps.append((label, callback))

  def call(self) -> None:
    """Invokes every callback in registration order."""
    for label, callback in list(self._taps):
      logger.debug("Hook '%s' -> %s", self.name, label)
      callback()

  @property
  def taps(self) -> List[str]:
    """Labels of the registered callbacks, in order."""
    return [label for label, _ in self._taps]

  def __len__(self) -> int:
    return len(self._taps)


class HookRegistry:
  """
  The `run` and `done` lifecycle hooks of one compiler.
  """

  def __init__(self):
    self._hooks: Dict[str, SyncHook] = {name.value: SyncHook(name.value) for name in HookName}

  @property
  def run(self) -> SyncHook:
    return self._hooks[HookName.RUN.value]

  @property
  def done(self) -> SyncHook:
    return self._hooks[HookName.DONE.value]

  def get(self, hook_name: str) -> SyncHook:
    """
    Looks up a hook by name.

    Raises:
        KeyError: If the name is not a known lifecycle event.
    """
    key = hook_name.value if isinstance(hook_name, HookName) else hook_name
    if key not in self._hooks:
      raise KeyError(f"Unknown hook '{hook_name}'. Known hooks: {sorted(self._hooks)}")
    return self._hooks[key]

  def tap(self, hook_name: str, callback: HookCallback, plugin_name: Optional[str] = None) -> None:
    """Appends `callback` to the named hook."""
    self.get(hook_name).tap(callback, plugin_name=plugin_name)

  def call(self, hook_name: str) -> None:
    """Fires the named hook."""
    self.get(hook_name).call()


def apply_plugins(compiler: Any, plugins: Iterable[Any]) -> int:
  """
  Gives every plugin the opportunity to tap the compiler's hooks.

  Args:
      compiler: The compiler instance passed to each `apply`.
      plugins: Objects implementing `Pluggable`.

  Returns:
      int: Number of plugins applied.

  Raises:
      TypeError: If an object does not implement `apply`.
  """
  count = 0
  for plugin in plugins:
    if not isinstance(plugin, Pluggable):
      raise TypeError(f"Plugin {plugin!r} does not expose apply(compiler)")
    plugin.apply(compiler)
    logger.debug("Applied plugin %s", type(plugin).__name__)
    count += 1
  return count
