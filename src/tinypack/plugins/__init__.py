"""
Built-in Plugins.

Each plugin implements `apply(compiler)` and taps the compiler's `run` / `done`
hooks. They can be listed in configuration by import string, e.g.
`plugins = ["tinypack.plugins:BuildTimerPlugin"]`.
"""

from tinypack.plugins.announce import DoneAnnouncePlugin, RunAnnouncePlugin
from tinypack.plugins.timer import BuildTimerPlugin

__all__ = ["RunAnnouncePlugin", "DoneAnnouncePlugin", "BuildTimerPlugin"]
