"""
Tests for the `build` and `graph` CLI commands.

Verifies:
1. Flags are turned into configuration and assets are written.
2. `--json` prints machine-readable stats.
3. Failures return a non-zero exit code without writing assets.
4. Configuration is picked up from pyproject.toml.
"""

import json

import pytest

from tinypack.cli.__main__ import main
from tinypack.cli.handlers.build import parse_entries
from tinypack.errors import ConfigError


def test_parse_entries_forms():
  assert parse_entries(None) is None
  assert parse_entries(["src/index.js"]) == {"main": "src/index.js"}
  assert parse_entries(["a=src/a.js", "b=src/b.js"]) == {"a": "src/a.js", "b": "src/b.js"}

  with pytest.raises(ConfigError):
    parse_entries(["src/x.js", "main=src/y.js"])


def test_build_writes_assets(example_project):
  out = example_project / "out"

  code = main(
    [
      "build",
      "--context",
      str(example_project),
      "--entry",
      "main=src/main.js",
      "alt=src/alt.js",
      "--out",
      str(out),
      "--filename",
      "[name].js",
    ]
  )

  assert code == 0
  assert (out / "main.js").is_file()
  assert (out / "alt.js").is_file()


def test_build_json_output(example_project, capsys):
  code = main(["build", "--context", str(example_project), "--entry", "src/main.js", "--json"])

  assert code == 0
  stats = json.loads(capsys.readouterr().out)
  assert [m["id"] for m in stats["modules"]] == ["./src/main.js", "./src/a.js", "./src/b.js"]
  assert list(stats["assets"]) == ["main.bundle.js"]
  assert (example_project / "dist" / "main.bundle.js").is_file()


def test_build_failure_returns_one(write_files):
  root = write_files({"main.js": "require('./missing');\n"})

  code = main(["build", "--context", str(root), "--entry", "main.js"])

  assert code == 1
  assert not (root / "dist").exists()


def test_build_reads_pyproject(example_project, monkeypatch):
  (example_project / "pyproject.toml").write_text(
    '[tool.tinypack]\nentry = { alt = "src/alt.js" }\n\n[tool.tinypack.output]\npath = "web"\n',
    encoding="utf-8",
  )
  monkeypatch.chdir(example_project)

  code = main(["build", "--set", "output.filename=app-[name].js"])

  assert code == 0
  assert (example_project / "web" / "app-alt.js").is_file()


def test_invalid_setting_returns_two(example_project):
  assert main(["build", "--context", str(example_project), "--set", "oops"]) == 2


def test_graph_prints_modules_without_writing(example_project, capsys):
  code = main(
    ["graph", "--context", str(example_project), "--entry", "main=src/main.js", "alt=src/alt.js", "--json"]
  )

  assert code == 0
  graph = json.loads(capsys.readouterr().out)
  b = next(m for m in graph["modules"] if m["id"] == "./src/b.js")
  assert b["chunk_names"] == ["main", "alt"]
  assert not (example_project / "dist").exists()


def test_graph_table_output(example_project):
  assert main(["graph", "--context", str(example_project), "--entry", "src/main.js"]) == 0


def test_graph_reports_errors(write_files):
  root = write_files({"main.js": "require(dynamic);\n"})

  assert main(["graph", "--context", str(root), "--entry", "main.js"]) == 1


def test_set_values_survive_unset_flags(example_project):
  code = main(
    [
      "build",
      "--context",
      str(example_project),
      "--set",
      "entry=src/alt.js",
      "output.path=web",
      "output.filename=app-[name].js",
    ]
  )

  assert code == 0
  assert (example_project / "web" / "app-main.js").is_file()
  assert not (example_project / "dist").exists()


def test_explicit_flags_win_over_set_values(example_project):
  code = main(
    [
      "build",
      "--context",
      str(example_project),
      "--entry",
      "src/b.js",
      "--filename",
      "[name].js",
      "--set",
      "output.filename=ignored-[name].js",
    ]
  )

  assert code == 0
  assert sorted(p.name for p in (example_project / "dist").iterdir()) == ["main.js"]
