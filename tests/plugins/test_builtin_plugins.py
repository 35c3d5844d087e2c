"""
Tests for the built-in lifecycle plugins.
"""

from unittest.mock import patch

from tinypack.core.compiler import create_compiler
from tinypack.plugins import BuildTimerPlugin, DoneAnnouncePlugin, RunAnnouncePlugin


def test_announce_plugins_log_on_their_hooks(example_project, make_config):
  config = make_config(entry="src/b.js", plugins=[RunAnnouncePlugin(), DoneAnnouncePlugin("all good")])
  compiler = create_compiler(config)

  assert compiler.hooks.run.taps == ["RunAnnouncePlugin"]
  assert compiler.hooks.done.taps == ["DoneAnnouncePlugin"]

  with patch("tinypack.plugins.announce.log_info") as info, patch("tinypack.plugins.announce.log_success") as success:
    compiler.run()

  info.assert_called_once()
  assert "Build started" in info.call_args[0][0]
  success.assert_called_once()
  assert "all good" in success.call_args[0][0]


def test_done_announcement_is_skipped_on_failure(tmp_path, make_config):
  compiler = create_compiler(make_config(entry="missing.js", plugins=[DoneAnnouncePlugin()]))

  with patch("tinypack.plugins.announce.log_success") as success:
    result = compiler.run()

  assert not result.success
  success.assert_not_called()


def test_build_timer_records_duration(example_project, make_config):
  timer = BuildTimerPlugin(report=False)
  compiler = create_compiler(make_config(entry="src/main.js", plugins=[timer]))

  assert timer.last_duration is None
  compiler.run()

  assert timer.last_duration is not None
  assert timer.last_duration >= 0


def test_build_timer_ignores_failed_builds(tmp_path, make_config):
  timer = BuildTimerPlugin(report=False)
  compiler = create_compiler(make_config(entry="missing.js", plugins=[timer]))

  compiler.run()

  assert timer.last_duration is None
