"""
JavaScript AST Capability.

A thin adapter over the `esprima` parser exposing the three operations the
bundler needs:

1.  `parse(source)` -> `JsAst`
2.  `visit_dependency_calls(ast, callback)`: calls `callback(DependencyCall)` for
    every `require(...)` call, in source order.
3.  `render(ast)` -> source text with all requested rewrites applied.

Rendering is range based: esprima is asked for node ranges, rewrites are
recorded as `(start, end, text)` edits on the `JsAst`, and `render` splices
them into the original text. Everything outside an edited range, including
comments and formatting, is preserved byte for byte.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple

import esprima
from esprima.error_handler import Error as EsprimaError

from tinypack.enums import SourceType
from tinypack.errors import ParseError

REQUIRE_IDENTIFIER = "require"


def _is_node(value: Any) -> bool:
  return hasattr(value, "__dict__") and isinstance(getattr(value, "type", None), str)


def _children(node: Any) -> Iterator[Any]:
  for key, value in vars(node).items():
    if key in ("range", "loc"):
      continue
    if isinstance(value, list):
      for item in value:
        if _is_node(item):
          yield item
    elif _is_node(value):
      yield value


def walk(root: Any) -> Iterator[Any]:
  """
  Iterates every node below (and including) `root`, depth first.
  """
  stack = [root]
  while stack:
    node = stack.pop()
    yield node
    stack.extend(reversed(list(_children(node))))


@dataclass
class JsAst:
  """
  A parsed module plus the pending text edits requested by visitors.
  """

  source: str
  program: Any
  edits: List[Tuple[int, int, str]] = field(default_factory=list)

  def replace(self, start: int, end: int, text: str) -> None:
    """Schedules replacement of `source[start:end]` with `text`."""
    self.edits.append((start, end, text))


class DependencyCall:
  """
  Handle to one `require(...)` call, passed to visitor callbacks.

  The handle carries the AST it belongs to, so the callback can rewrite the
  call's argument without touching shared node state.
  """

  def __init__(self, ast: JsAst, node: Any):
    self.ast = ast
    self.node = node

  @property
  def arguments(self) -> List[Any]:
    return list(self.node.arguments or [])

  @property
  def line(self) -> Optional[int]:
    loc = getattr(self.node, "loc", None)
    return loc.start.line if loc is not None else None

  @property
  def specifier(self) -> Optional[str]:
    """
    The literal string argument, or None if the call has any other shape.
    """
    args = self.arguments
    if len(args) != 1:
      return None
    arg = args[0]
    if arg.type == "Literal" and isinstance(arg.value, str):
      return arg.value
    return None

  def describe_argument(self) -> str:
    """Short description of the argument shape, for error messages."""
    args = self.arguments
    if len(args) != 1:
      return f"{len(args)} arguments"
    return args[0].type

  def rewrite(self, new_specifier: str) -> None:
    """
    Replaces the literal argument with another string literal.

    Args:
        new_specifier (str): The replacement value (e.g. a module id).
    """
    start, end = self.arguments[0].range
    self.ast.replace(start, end, json.dumps(new_specifier))


DependencyCallback = Callable[[DependencyCall], None]


class EsprimaCapability:
  """
  parse / visit / render over esprima.
  """

  def __init__(self, source_type: SourceType = SourceType.SCRIPT):
    self.source_type = SourceType(source_type)

  def parse(self, source: str, module_id: Optional[str] = None) -> JsAst:
    """
    Parses JavaScript source.

    Args:
        source (str): Module source code.
        module_id (str, optional): Used for error context.

    Returns:
        JsAst: The parsed program.

    Raises:
        ParseError: If the source is not valid JavaScript.
    """
    options = {"range": True, "loc": True}
    try:
      if self.source_type == SourceType.MODULE:
        program = esprima.parseModule(source, options)
      else:
        program = esprima.parseScript(source, options)
    except EsprimaError as e:
      raise ParseError(f"Syntax error: {e}", module_id=module_id) from e
    return JsAst(source=source, program=program)

  def visit_dependency_calls(self, ast: JsAst, callback: DependencyCallback) -> None:
    """
    Invokes `callback` for each `require(...)` call, ordered by position.

    Args:
        ast (JsAst): The parsed module.
        callback (DependencyCallback): Receives a `DependencyCall` handle.
    """
    calls = [
      node
      for node in walk(ast.program)
      if node.type == "CallExpression"
      and node.callee.type == "Identifier"
      and node.callee.name == REQUIRE_IDENTIFIER
    ]
    calls.sort(key=lambda n: n.range[0])
    for node in calls:
      callback(DependencyCall(ast, node))

  def render(self, ast: JsAst) -> str:
    """
    Produces source text with every scheduled edit applied.

    Args:
        ast (JsAst): The parsed (and possibly rewritten) module.

    Returns:
        str: The rendered source.
    """
    code = ast.source
    for start, end, text in sorted(ast.edits, key=lambda e: e[0], reverse=True):
      code = code[:start] + text + code[end:]
    return code
