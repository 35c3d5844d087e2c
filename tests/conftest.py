"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Helpers writing small JavaScript projects into a temporary directory.
- A `node` marker helper for runtime-equivalence tests.
"""

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Add src to path so we can import 'tinypack' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from tinypack.config import BundlerConfig  # noqa: E402

NODE = shutil.which("node")

requires_node = pytest.mark.skipif(NODE is None, reason="node executable not available")


@pytest.fixture
def write_files(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
  """
  Returns a helper writing `{relative path: content}` under `tmp_path`.
  """

  def _write(files: Dict[str, str]) -> Path:
    for rel, content in files.items():
      target = tmp_path / rel
      target.parent.mkdir(parents=True, exist_ok=True)
      target.write_text(content, encoding="utf-8")
    return tmp_path

  return _write


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., BundlerConfig]:
  """
  Returns a factory for configs rooted at `tmp_path`, writing to `tmp_path/dist`.
  """

  def _make(**options) -> BundlerConfig:
    options.setdefault("context", tmp_path)
    options.setdefault("output", {"path": str(tmp_path / "dist")})
    return BundlerConfig.model_validate(options)

  return _make


@pytest.fixture
def example_project(write_files) -> Path:
  """
  Two entries sharing a module: main -> a -> b, alt -> b.
  """
  return write_files(
    {
      "src/main.js": "const a = require('./a');\nconsole.log(a.value);\n",
      "src/a.js": "const b = require('./b');\nmodule.exports = { value: b.value + 1 };\n",
      "src/b.js": "module.exports = { value: 1 };\n",
      "src/alt.js": "const b = require('./b');\nconsole.log(b.value);\n",
    }
  )


def run_node(script: Path) -> str:
  """Executes a bundle with node and returns its stripped stdout."""
  completed = subprocess.run([NODE, str(script)], capture_output=True, text=True, check=True, timeout=30)
  return completed.stdout.strip()
