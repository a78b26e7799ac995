"""JavaScript runtime and artifact evaluator.

Fetched generator artifacts are plain browser scripts. They run inside an
embedded V8 engine (``py_mini_racer``), never in the Python process's own
namespace. Values stay inside the engine and are handed to Python as
``JSRef`` references; only JSON-compatible projections cross the boundary.

Each artifact runs as the body of a fresh JavaScript function, so its
``var``/``let``/``const``/``function`` declarations stay private to that
evaluation while the engine's global object (where the legacy seeding
library installs itself) stays visible.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from py_mini_racer import JSEvalException, MiniRacer

from bingo_convert.errors import GeneratorRuntimeError

logger = logging.getLogger(__name__)

_REFS = "__bingoConvertRefs"

# Browser globals some generator bundles look for at load time.
_BOOTSTRAP = f"""
var {_REFS} = [];
if (typeof globalThis.window === "undefined") {{ globalThis.window = globalThis; }}
if (typeof globalThis.self === "undefined") {{ globalThis.self = globalThis; }}
if (typeof globalThis.console === "undefined") {{
  globalThis.console = {{
    log: function () {{}}, info: function () {{}}, warn: function () {{}},
    error: function () {{}}, debug: function () {{}}
  }};
}}
"""


class JSRef:
    """Reference to a value held inside a ``JSRuntime``.

    Attributes:
        index: Slot of the value in the runtime's reference table.
    """

    def __init__(self, runtime: JSRuntime, index: int) -> None:
        self._runtime = runtime
        self.index = index

    def __repr__(self) -> str:
        return f"JSRef({self.index})"

    @property
    def expression(self) -> str:
        """JavaScript expression that yields the referenced value."""
        return f"{_REFS}[{self.index}]"

    def type_of(self) -> str:
        """Result of JavaScript ``typeof`` on the value."""
        return str(self._runtime.eval(f"typeof {self.expression}"))

    @property
    def is_callable(self) -> bool:
        return self.type_of() == "function"

    @property
    def is_truthy(self) -> bool:
        return bool(self._runtime.eval(f"!!{self.expression}"))

    def to_python(self) -> Any:
        """JSON round-trip of the value (``None`` for ``undefined``)."""
        return self._runtime.to_python(self.expression)


class JSRuntime:
    """A single V8 context shared by every evaluation of a conversion context.

    Args:
        timeout_ms: Per-evaluation time limit in milliseconds, ``None`` for none.
    """

    def __init__(self, timeout_ms: int | None = None) -> None:
        self._timeout_ms = timeout_ms
        self._ctx = MiniRacer()
        self.eval(_BOOTSTRAP)

    def eval(self, source: str) -> Any:
        """Evaluate *source* as a global script and return its primitive result.

        Raises:
            GeneratorRuntimeError: If the script fails to parse, throws, or
                exceeds the time limit.
        """
        try:
            if self._timeout_ms is None:
                return self._ctx.eval(source)
            return self._ctx.eval(source, timeout=self._timeout_ms)
        except JSEvalException as exc:
            msg = f"Script evaluation failed: {exc}"
            raise GeneratorRuntimeError(msg) from exc

    def execute(self, source: str) -> None:
        """Run *source* in the global scope, discarding its completion value."""
        self.eval(f"{source}\n;void 0;")

    def store(self, expression: str) -> JSRef:
        """Evaluate *expression* and keep its value in the reference table."""
        index = self.eval(f"{_REFS}.push(({expression})) - 1")
        return JSRef(self, int(index))

    def call(self, function: JSRef, *args: JSRef | Any) -> JSRef:
        """Call a referenced function; plain Python arguments are passed as JSON."""
        rendered = ", ".join(a.expression if isinstance(a, JSRef) else json.dumps(a) for a in args)
        return self.store(f"{function.expression}({rendered})")

    def to_python(self, expression: str) -> Any:
        """Evaluate *expression* and convert it to Python through JSON."""
        text = self.eval(f"JSON.stringify({expression})")
        if not isinstance(text, str):
            return None
        return json.loads(text)

    def clear_refs(self) -> None:
        """Drop all stored references so the engine can collect them."""
        self.eval(f"{_REFS}.length = 0")


class EvaluatedScope:
    """The private scope left behind by one evaluated script."""

    def __init__(self, runtime: JSRuntime, scope: JSRef) -> None:
        self._runtime = runtime
        self._scope = scope

    def lookup(self, expression: str) -> JSRef:
        """Evaluate *expression* against the script's bindings.

        Raises:
            GeneratorRuntimeError: If the expression throws, e.g. because it
                references an undefined binding without a ``typeof`` guard.
        """
        return self._runtime.call(self._scope, expression)


class ArtifactEvaluator:
    """Runs fetched scripts in isolated function scopes of a ``JSRuntime``."""

    def __init__(self, runtime: JSRuntime) -> None:
        self._runtime = runtime

    def load(self, script_text: str) -> EvaluatedScope:
        """Run *script_text* once and return its scope for later probing."""
        wrapped = (
            "(function () {\n"
            + script_text
            + "\n;\nreturn function (__bingoConvertProbe) { return eval(__bingoConvertProbe); };\n})()"
        )
        scope = self._runtime.store(wrapped)
        logger.debug("Evaluated script (%d chars)", len(script_text))
        return EvaluatedScope(self._runtime, scope)

    def evaluate(self, script_text: str, expression: str) -> JSRef:
        """Run *script_text* and return the value of *expression* in its scope."""
        return self.load(script_text).lookup(expression)
