"""Tests for the JavaScript runtime and artifact evaluator.

These run scripts in the embedded V8 engine.
"""

from __future__ import annotations

from bingo_convert.errors import GeneratorRuntimeError
from bingo_convert.evaluator import ArtifactEvaluator, JSRuntime
from conftest import goal_list_script
import pytest


@pytest.fixture()
def runtime() -> JSRuntime:
    return JSRuntime(timeout_ms=2000)


@pytest.fixture()
def evaluator(runtime: JSRuntime) -> ArtifactEvaluator:
    return ArtifactEvaluator(runtime)


@pytest.mark.integration
class TestJSRuntime:
    def test_to_python_round_trips_json(self, runtime: JSRuntime) -> None:
        assert runtime.to_python('({a: [1, "x", null], b: true})') == {"a": [1, "x", None], "b": True}

    def test_to_python_undefined_is_none(self, runtime: JSRuntime) -> None:
        assert runtime.to_python("undefined") is None

    def test_execute_defines_globals(self, runtime: JSRuntime) -> None:
        runtime.execute("Math.seedrandom = function () { return 'seeded'; };")
        assert runtime.to_python("Math.seedrandom()") == "seeded"

    def test_browser_globals_available(self, runtime: JSRuntime) -> None:
        assert runtime.to_python("window === globalThis && self === globalThis") is True
        assert runtime.to_python('typeof console.log') == "function"

    def test_syntax_error_raises(self, runtime: JSRuntime) -> None:
        with pytest.raises(GeneratorRuntimeError, match="Script evaluation failed"):
            runtime.execute("function (")

    def test_timeout_raises(self) -> None:
        runtime = JSRuntime(timeout_ms=50)
        with pytest.raises(GeneratorRuntimeError):
            runtime.execute("while (true) {}")

    def test_call_passes_refs_and_json(self, runtime: JSRuntime) -> None:
        fn = runtime.store("(function (xs, opts) { return xs.length + opts.n; })")
        xs = runtime.store("[1, 2, 3]")
        result = runtime.call(fn, xs, {"n": 10})
        assert result.to_python() == 13

    def test_clear_refs(self, runtime: JSRuntime) -> None:
        runtime.store("1")
        runtime.store("2")
        runtime.clear_refs()
        assert runtime.store("3").index == 0


@pytest.mark.integration
class TestArtifactEvaluator:
    """Scripts run in private scopes and are probed with expressions."""

    def test_const_binding_visible_to_expression(self, evaluator: ArtifactEvaluator) -> None:
        ref = evaluator.evaluate(goal_list_script(["A", "B"]), "bingoList")
        assert ref.is_truthy
        assert ref.to_python() == [{"name": "A", "types": ["misc"]}, {"name": "B", "types": ["misc"]}]

    def test_function_declaration_visible(self, evaluator: ArtifactEvaluator) -> None:
        ref = evaluator.evaluate("function ootBingoGenerator() { return []; }", "ootBingoGenerator")
        assert ref.is_callable

    def test_declarations_do_not_leak_into_globals(self, evaluator: ArtifactEvaluator, runtime: JSRuntime) -> None:
        evaluator.evaluate("var leaked = 1; const alsoLeaked = 2;", "leaked")
        assert runtime.to_python("typeof leaked") == "undefined"
        assert runtime.to_python("typeof alsoLeaked") == "undefined"

    def test_scripts_are_isolated_from_each_other(self, evaluator: ArtifactEvaluator) -> None:
        evaluator.evaluate("var shared = 'first';", "shared")
        ref = evaluator.evaluate("var other = 1;", 'typeof shared')
        assert ref.to_python() == "undefined"

    def test_globals_visible_to_scripts(self, evaluator: ArtifactEvaluator, runtime: JSRuntime) -> None:
        runtime.execute("Math.seedrandom = function (s) { return 'seeded ' + s; };")
        ref = evaluator.evaluate("var result = Math.seedrandom(4);", "result")
        assert ref.to_python() == "seeded 4"

    def test_strict_mode_script(self, evaluator: ArtifactEvaluator) -> None:
        ref = evaluator.evaluate("'use strict';\nconst bingoList = [1, 2];", "bingoList.length")
        assert ref.to_python() == 2

    def test_one_scope_many_lookups(self, evaluator: ArtifactEvaluator) -> None:
        scope = evaluator.load("var a = 1; var b = {c: 2};")
        assert scope.lookup("a").to_python() == 1
        assert scope.lookup("b.c").to_python() == 2

    def test_undefined_binding_raises(self, evaluator: ArtifactEvaluator) -> None:
        with pytest.raises(GeneratorRuntimeError):
            evaluator.evaluate("var somethingElse = 1;", "bingoList")

    def test_guarded_probe_returns_undefined(self, evaluator: ArtifactEvaluator) -> None:
        ref = evaluator.evaluate("var x = 1;", 'typeof bingoList !== "undefined" ? bingoList : undefined')
        assert not ref.is_truthy
        assert ref.type_of() == "undefined"

    def test_throwing_script_raises(self, evaluator: ArtifactEvaluator) -> None:
        with pytest.raises(GeneratorRuntimeError, match="boom"):
            evaluator.evaluate("throw new Error('boom');", "1")

    def test_trailing_line_comment(self, evaluator: ArtifactEvaluator) -> None:
        ref = evaluator.evaluate("var bingoList = [1]; // end of file", "bingoList")
        assert ref.to_python() == [1]
