"""
Tests for BundlerConfig validation and TOML loading.
"""

import re
from pathlib import Path

import pytest

from tinypack.config import BundlerConfig, ModuleRule, import_string, parse_cli_key_values
from tinypack.errors import ConfigError
from tinypack.loaders import json_loader
from tinypack.plugins import BuildTimerPlugin


PYPROJECT = """
[project]
name = "demo"

[tool.tinypack]
entry = { app = "src/app.js" }
plugins = ["tinypack.plugins:BuildTimerPlugin"]

[tool.tinypack.output]
path = "public"
filename = "[name].js"

[tool.tinypack.resolve]
extensions = [".js", ".json"]

[[tool.tinypack.module.rules]]
test = "\\\\.json$"
use = ["tinypack.loaders:json_loader"]
"""


def test_load_reads_tool_table_from_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
  nested = tmp_path / "src" / "deep"
  nested.mkdir(parents=True)

  config = BundlerConfig.load(search_path=nested)

  assert config.context == tmp_path.resolve()
  assert config.entries == {"app": "src/app.js"}
  assert config.output_dir == tmp_path.resolve() / "public"
  assert config.output.filename_for("app") == "app.js"
  assert config.resolve.extensions == [".js", ".json"]
  assert config.module.rules[0].use == [json_loader]
  assert config.module.rules[0].matches("/x/data.json")
  assert isinstance(config.plugins[0], BuildTimerPlugin)


def test_overrides_win_over_toml_and_none_is_ignored(tmp_path):
  (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")

  config = BundlerConfig.load(
    search_path=tmp_path,
    entry={"main": "index.js"},
    plugins=None,
    **{"output.filename": "bundle-[name].js", "resolve.extensions": None},
  )

  assert config.entries == {"main": "index.js"}
  assert config.output.filename == "bundle-[name].js"
  assert config.output.path == Path("public")
  assert config.resolve.extensions == [".js", ".json"]
  assert len(config.plugins) == 1


def test_explicit_standalone_toml_file(tmp_path):
  cfg_dir = tmp_path / "conf"
  cfg_dir.mkdir()
  cfg = cfg_dir / "tinypack.toml"
  cfg.write_text('entry = "main.js"\ncontext = ".."\n', encoding="utf-8")

  config = BundlerConfig.load(config_path=cfg)

  assert config.context == tmp_path.resolve()
  assert config.entries == {"main": "main.js"}


def test_unreadable_toml_raises_config_error(tmp_path):
  cfg = tmp_path / "broken.toml"
  cfg.write_text("entry = ", encoding="utf-8")

  with pytest.raises(ConfigError):
    BundlerConfig.load(config_path=cfg)


def test_missing_entry_is_a_config_error(tmp_path):
  with pytest.raises(ConfigError, match="entry"):
    BundlerConfig.load(search_path=tmp_path)


def test_filename_must_contain_name_token(tmp_path):
  with pytest.raises(ConfigError, match=r"\[name\]"):
    BundlerConfig.load(search_path=tmp_path, entry="a.js", **{"output.filename": "bundle.js"})


def test_rule_compiles_patterns_and_resolves_import_strings():
  rule = ModuleRule(test=r"\.txt$", use="tinypack.loaders:strip_bom")

  assert isinstance(rule.test, re.Pattern)
  assert rule.use[0]("\ufeffhello") == "hello"


@pytest.mark.parametrize(
  "rule",
  [
    {"test": "(unclosed", "use": []},
    {"test": 42, "use": []},
    {"test": ".js", "use": ["tinypack.loaders:does_not_exist"]},
    {"test": ".js", "use": [42]},
  ],
)
def test_invalid_rules_are_rejected(tmp_path, rule):
  with pytest.raises(ConfigError):
    BundlerConfig.load(search_path=tmp_path, entry="a.js", module={"rules": [rule]})


def test_plugins_must_expose_apply(tmp_path):
  with pytest.raises(ConfigError, match="apply"):
    BundlerConfig.load(search_path=tmp_path, entry="a.js", plugins=[object()])


def test_import_string_forms():
  assert import_string("tinypack.loaders:json_loader") is json_loader
  assert import_string("tinypack.loaders.json_loader") is json_loader

  with pytest.raises(ValueError):
    import_string("nomodule_here_xyz:thing")
  with pytest.raises(ValueError):
    import_string("nodots")


def test_parse_cli_key_values_infers_types():
  parsed = parse_cli_key_values(["a=1", "b=2.5", "c=true", "d=False", "output.filename=[name].js"])

  assert parsed == {"a": 1, "b": 2.5, "c": True, "d": False, "output.filename": "[name].js"}
  assert parse_cli_key_values(None) == {}

  with pytest.raises(ConfigError):
    parse_cli_key_values(["novalue"])
  with pytest.raises(ConfigError):
    parse_cli_key_values(["=1"])


@pytest.mark.parametrize(
  "raw, expected",
  [
    ("1e3", 1000.0),
    ("-2", -2),
    ("nan", "nan"),
    ("inf", "inf"),
    ("web", "web"),
    ("v1.js", "v1.js"),
    ("TRUE", True),
    ("", ""),
  ],
)
def test_setting_values_are_coerced_conservatively(raw, expected):
  value = parse_cli_key_values([f"key={raw}"])["key"]

  assert value == expected
  assert type(value) is type(expected)
