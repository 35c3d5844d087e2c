"""
Bundler Configuration Store.

Defines the `BundlerConfig` Pydantic model (entries, output, loader rules,
resolution extensions, plugins) and the loader that reads it from the
`[tool.tinypack]` table of a `pyproject.toml`, applying CLI overrides on top.

Loader callables and plugin classes may be given as import strings of the form
`"package.module:attribute"`, which lets TOML configuration reference Python
code.
"""

import importlib
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tinypack.enums import SourceType
from tinypack.errors import ConfigError

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

DEFAULT_CHUNK_NAME = "main"
NAME_TOKEN = "[name]"


def import_string(dotted: str) -> Any:
  """
  Imports an attribute from a 'package.module:attribute' reference.

  Args:
      dotted (str): The reference. A '.' may replace the ':' separator.

  Returns:
      Any: The imported object.

  Raises:
      ValueError: If the module or attribute cannot be found.
  """
  if ":" in dotted:
    module_name, attr = dotted.split(":", 1)
  else:
    module_name, _, attr = dotted.rpartition(".")
  if not module_name or not attr:
    raise ValueError(f"Invalid import reference: '{dotted}'")
  try:
    module = importlib.import_module(module_name)
  except ImportError as e:
    raise ValueError(f"Cannot import '{module_name}': {e}") from e
  try:
    return getattr(module, attr)
  except AttributeError as e:
    raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from e


class OutputOptions(BaseModel):
  """Where and how assets are written."""

  path: Path = Field(Path("dist"), description="Output directory; created if absent.")
  filename: str = Field("[name].bundle.js", description="Asset filename pattern containing '[name]'.")

  @field_validator("filename")
  @classmethod
  def validate_filename(cls, v: str) -> str:
    """
    Ensures the pattern carries the chunk name token.

    Args:
        v (str): The filename pattern.

    Returns:
        str: The unchanged pattern.

    Raises:
        ValueError: If '[name]' is missing.
    """
    if NAME_TOKEN not in v:
      raise ValueError(f"output.filename must contain '{NAME_TOKEN}', got '{v}'")
    return v

  def filename_for(self, chunk_name: str) -> str:
    """Substitutes the chunk name into the filename pattern."""
    return self.filename.replace(NAME_TOKEN, chunk_name)


class ModuleRule(BaseModel):
  """
  A loader rule: transforms in `use` apply to files whose path matches `test`.
  """

  model_config = ConfigDict(arbitrary_types_allowed=True)

  test: Any = Field(..., description="Regular expression searched in the module's absolute path.")
  use: List[Any] = Field(default_factory=list, description="Transforms (callables or import strings).")

  @field_validator("test", mode="before")
  @classmethod
  def compile_test(cls, v: Any) -> Any:
    """Compiles string patterns."""
    if isinstance(v, re.Pattern):
      return v
    if isinstance(v, str):
      try:
        return re.compile(v)
      except re.error as e:
        raise ValueError(f"Invalid rule pattern '{v}': {e}") from e
    raise ValueError(f"Rule 'test' must be a regex string or compiled pattern, got {type(v).__name__}")

  @field_validator("use", mode="before")
  @classmethod
  def resolve_loaders(cls, v: Any) -> List[Any]:
    """Resolves import strings and checks every loader is callable."""
    if callable(v) or isinstance(v, str):
      v = [v]
    resolved = []
    for item in v:
      if isinstance(item, str):
        item = import_string(item)
      if not callable(item):
        raise ValueError(f"Loader {item!r} is not callable")
      resolved.append(item)
    return resolved

  def matches(self, path: str) -> bool:
    """Returns True if the rule applies to `path`."""
    return self.test.search(path) is not None


class ModuleOptions(BaseModel):
  rules: List[ModuleRule] = Field(default_factory=list)


class ResolveOptions(BaseModel):
  extensions: List[str] = Field(default_factory=lambda: [".js"], description="Extensions tried in order.")


class BundlerConfig(BaseModel):
  """
  Configuration for one `Compiler` instance.
  """

  model_config = ConfigDict(arbitrary_types_allowed=True)

  context: Path = Field(default_factory=Path.cwd, description="Build root for module ids and entry paths.")
  entry: Union[str, Dict[str, str]] = Field(..., description="Entry path, or mapping chunk name -> path.")
  output: OutputOptions = Field(default_factory=OutputOptions)
  module: ModuleOptions = Field(default_factory=ModuleOptions)
  resolve: ResolveOptions = Field(default_factory=ResolveOptions)
  plugins: List[Any] = Field(default_factory=list, description="Objects exposing apply(compiler).")
  source_type: SourceType = Field(SourceType.SCRIPT, description="Parser goal for module sources.")

  @field_validator("entry")
  @classmethod
  def validate_entry(cls, v: Union[str, Dict[str, str]]) -> Union[str, Dict[str, str]]:
    """Rejects empty entry configurations."""
    if not v:
      raise ValueError("At least one entry is required")
    return v

  @field_validator("plugins", mode="before")
  @classmethod
  def resolve_plugins(cls, v: Any) -> List[Any]:
    """Instantiates plugin import strings and checks the apply() capability."""
    resolved = []
    for item in v or []:
      if isinstance(item, str):
        item = import_string(item)()
      if not callable(getattr(item, "apply", None)):
        raise ValueError(f"Plugin {item!r} does not expose apply(compiler)")
      resolved.append(item)
    return resolved

  @property
  def entries(self) -> Dict[str, str]:
    """
    Normalises single and multiple entry forms.

    Returns:
        Dict[str, str]: Chunk name -> entry path, in configuration order.
    """
    if isinstance(self.entry, str):
      return {DEFAULT_CHUNK_NAME: self.entry}
    return dict(self.entry)

  @property
  def output_dir(self) -> Path:
    """Output directory, anchored at the context when relative."""
    if self.output.path.is_absolute():
      return self.output.path
    return self.context / self.output.path

  @classmethod
  def load(
    cls,
    config_path: Optional[Path] = None,
    search_path: Optional[Path] = None,
    **overrides: Any,
  ) -> "BundlerConfig":
    """
    Loads configuration from TOML and overrides it with explicit values.

    Args:
        config_path (Optional[Path]): Explicit config file. A `pyproject.toml`
            contributes its `[tool.tinypack]` table; any other file is read whole.
        search_path (Optional[Path]): Directory to start searching for
            `pyproject.toml` when no explicit file is given.
        **overrides: Top-level or dotted keys (e.g. `output.filename`).
            `None` values are ignored.

    Returns:
        BundlerConfig: The validated configuration.

    Raises:
        ConfigError: If the file cannot be read or validation fails.
    """
    if config_path is not None:
      data, toml_dir = _read_toml_file(Path(config_path))
    else:
      data, toml_dir = _load_toml_settings(search_path or Path.cwd())

    for key, value in overrides.items():
      if value is not None:
        _set_dotted(data, key, value)

    if "context" in data:
      context = Path(data["context"])
      if not context.is_absolute() and toml_dir:
        context = toml_dir / context
      data["context"] = context.resolve()
    elif toml_dir:
      data["context"] = toml_dir

    try:
      return cls.model_validate(data)
    except ValidationError as e:
      raise ConfigError(f"Invalid configuration: {e}") from e


def _set_dotted(data: Dict[str, Any], key: str, value: Any) -> None:
  """Assigns `value` at a dotted path inside nested dicts."""
  parts = key.split(".")
  target = data
  for part in parts[:-1]:
    target = target.setdefault(part, {})
  target[parts[-1]] = value


def _read_toml_file(path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Reads an explicit TOML config file.

  Args:
      path (Path): The file to read.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory holding the file.
  """
  if not tomllib:
    raise ConfigError("TOML support requires 'tomli' on Python < 3.11", path=str(path))
  try:
    with open(path, "rb") as f:
      data = tomllib.load(f)
  except (OSError, tomllib.TOMLDecodeError) as e:
    raise ConfigError(f"Cannot read configuration: {e}", path=str(path)) from e

  if path.name == "pyproject.toml":
    data = data.get("tool", {}).get("tinypack", {})
  return dict(data), path.resolve().parent


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for a 'pyproject.toml' with a [tool.tinypack] table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      data, _ = _read_toml_file(toml_path)
      if data:
        return data, parent

  return {}, None


def _coerce_setting(raw: str) -> Any:
  """
  Infers a bool, int or float from a `--set` value; anything else stays a string.

  Only values containing a digit are tried as numbers, so 'nan', 'inf' and
  'infinity' remain strings while '3', '0.5' and '1e3' are converted.
  """
  lowered = raw.lower()
  if lowered in ("true", "false"):
    return lowered == "true"
  if any(ch.isdigit() for ch in raw):
    for cast in (int, float):
      try:
        return cast(raw)
      except ValueError:
        continue
  return raw


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Turns `--set key=value` items into configuration overrides.

  Keys may be dotted (e.g. 'output.filename') and are applied by
  `BundlerConfig.load`. Later items win over earlier ones.

  Args:
      items (Optional[List[str]]): Values collected by the `--set` flag.

  Returns:
      Dict[str, Any]: Key -> inferred value.

  Raises:
      ConfigError: If an item has no '=' or an empty key.
  """
  settings: Dict[str, Any] = {}
  for item in items or []:
    key, sep, raw = item.partition("=")
    key = key.strip()
    if not sep or not key:
      raise ConfigError(f"Invalid setting '{item}'. Expected 'key=value'.")
    settings[key] = _coerce_setting(raw.strip())
  return settings
