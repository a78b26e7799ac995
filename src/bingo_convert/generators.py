"""Generator adapter: locate and invoke a release's board generator.

Generator releases expose their entry point in one of a closed set of known
shapes. Shapes are probed in priority order against the evaluated generator
script; the first one that yields a function wins. Adding support for a new
historical release means adding a shape to ``KNOWN_GENERATOR_SHAPES``.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from bingo_convert.errors import UnsupportedVersionError

if TYPE_CHECKING:
    from bingo_convert.evaluator import EvaluatedScope, JSRef, JSRuntime
    from bingo_convert.models import ConversionRequest

logger = logging.getLogger(__name__)

_IDENTIFIER: re.Pattern[str] = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

# Reduces the generator's return value to JSON: strings stay strings, objects
# keep only ``name``, anything else (holes, null, numbers) becomes null.
# Non-array results become an object describing their type.
_BOARD_PROJECTION = """(function (board) {
  if (!Array.isArray(board)) {
    return {unexpected: board === null ? "null" : typeof board};
  }
  return Array.from(board, function (goal) {
    if (typeof goal === "string") { return goal; }
    if (goal === null || typeof goal !== "object") { return null; }
    return {name: goal.name};
  });
})"""


def _check_identifier(v: str) -> str:
    if not _IDENTIFIER.fullmatch(v):
        msg = f"Not a JavaScript identifier: {v!r}"
        raise ValueError(msg)
    return v


class NamespacedGenerator(BaseModel):
    """Generator exposed as a member of a library object (newer releases)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["namespaced"] = "namespaced"
    namespace: str
    name: str

    @field_validator("namespace", "name")
    @classmethod
    def _names_are_identifiers(cls, v: str) -> str:
        return _check_identifier(v)

    def probe_expression(self) -> str:
        ns, fn = self.namespace, self.name
        return (
            f'typeof {ns} !== "undefined" && {ns} !== null && typeof {ns}.{fn} === "function"'
            f" ? {ns}.{fn} : undefined"
        )

    def describe(self) -> str:
        return f"{self.namespace}.{self.name}"


class BareGlobalGenerator(BaseModel):
    """Generator exposed as a bare top-level function (older releases)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bare_global"] = "bare_global"
    name: str

    @field_validator("name")
    @classmethod
    def _name_is_identifier(cls, v: str) -> str:
        return _check_identifier(v)

    def probe_expression(self) -> str:
        return f'typeof {self.name} === "function" ? {self.name} : undefined'

    def describe(self) -> str:
        return self.name


GeneratorShape = NamespacedGenerator | BareGlobalGenerator

KNOWN_GENERATOR_SHAPES: tuple[GeneratorShape, ...] = (
    NamespacedGenerator(namespace="BingoLibrary", name="ootBingoGenerator"),
    BareGlobalGenerator(name="ootBingoGenerator"),
)


class LocatedGenerator:
    """A generator function found in an evaluated script, with its shape."""

    def __init__(self, shape: GeneratorShape, function: JSRef) -> None:
        self.shape = shape
        self.function = function


def locate_generator(
    scope: EvaluatedScope,
    shapes: tuple[GeneratorShape, ...] = KNOWN_GENERATOR_SHAPES,
) -> LocatedGenerator:
    """Probe *shapes* in order and return the first that yields a function.

    Raises:
        UnsupportedVersionError: If no shape matches.
        GeneratorRuntimeError: If a probe itself throws.
    """
    for shape in shapes:
        candidate = scope.lookup(shape.probe_expression())
        if candidate.is_callable:
            logger.debug("Generator found as %s", shape.describe())
            return LocatedGenerator(shape, candidate)
        logger.debug("No generator at %s", shape.describe())

    msg = "Could not find the generator function. This version may be unsupported."
    raise UnsupportedVersionError(msg, diagnostics={"probed": [s.describe() for s in shapes]})


def invoke_generator(
    runtime: JSRuntime,
    located: LocatedGenerator,
    goal_list: JSRef,
    request: ConversionRequest,
) -> Any:
    """Run the generator and return its board projected to Python.

    The generator is called as ``fn(goalList, {seed, mode, lang: "name"})``.

    Raises:
        GeneratorRuntimeError: If the generator throws or times out.
    """
    options = {"seed": request.seed, "mode": request.mode, "lang": "name"}
    board = runtime.call(located.function, goal_list, options)
    return runtime.to_python(f"{_BOARD_PROJECTION}({board.expression})")
