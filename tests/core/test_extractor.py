"""
Tests for DependencyExtractor.

Verifies that require() specifiers are resolved, rewritten to module ids,
recorded on the module and in the file dependency set, and that unsupported
call shapes are rejected.
"""

import pytest

from tinypack.core.extractor import DependencyExtractor
from tinypack.core.models import Module
from tinypack.core.resolver import to_unix_path
from tinypack.errors import ResolutionError, UnsupportedDependencyError


def make_module(root, rel):
  path = to_unix_path(str(root / rel))
  return Module(id="./" + rel, absolute_path=path)


def test_rewrites_specifiers_to_module_ids(write_files):
  root = write_files({"src/main.js": "", "src/util/math.js": "", "src/data.json": "{}"})
  extractor = DependencyExtractor(str(root), [".js", ".json"])
  module = make_module(root, "src/main.js")
  file_deps = {}

  source = "const m = require('./util/math');\nconst d = require('./data');\n"
  extractor.extract(module, source, file_deps)

  assert module.transformed_source == (
    'const m = require("./src/util/math.js");\nconst d = require("./src/data.json");\n'
  )
  assert [(d.specifier, d.resolved_id) for d in module.dependencies] == [
    ("./util/math", "./src/util/math.js"),
    ("./data", "./src/data.json"),
  ]
  assert list(file_deps) == [
    to_unix_path(str(root / "src/util/math.js")),
    to_unix_path(str(root / "src/data.json")),
  ]


def test_module_without_requires_is_unchanged(write_files):
  root = write_files({"a.js": ""})
  extractor = DependencyExtractor(str(root), [".js"])
  module = make_module(root, "a.js")

  extractor.extract(module, "module.exports = 42;\n", {})

  assert module.dependencies == []
  assert module.transformed_source == "module.exports = 42;\n"


def test_dynamic_specifier_is_unsupported(write_files):
  root = write_files({"a.js": ""})
  extractor = DependencyExtractor(str(root), [".js"])
  module = make_module(root, "a.js")

  with pytest.raises(UnsupportedDependencyError) as exc:
    extractor.extract(module, "const name = './b';\nrequire('./' + name);\n", {})

  assert exc.value.module_id == "./a.js"
  assert "BinaryExpression" in str(exc.value)
  assert "line 2" in str(exc.value)


def test_unresolvable_specifier_carries_module_id(write_files):
  root = write_files({"a.js": ""})
  extractor = DependencyExtractor(str(root), [".js"])
  module = make_module(root, "a.js")

  with pytest.raises(ResolutionError) as exc:
    extractor.extract(module, "require('./missing');", {})

  assert exc.value.module_id == "./a.js"
  assert exc.value.specifier == "./missing"
