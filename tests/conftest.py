"""Shared fixtures for the bingo_convert test suite."""

from __future__ import annotations

import json
from typing import Any

from bingo_convert.context import ConversionContext
from bingo_convert.models import DEFAULT_BASE_URL, ConversionRequest, ConverterConfig
from bingo_convert.random_source import NullRandomSource
import httpx
import pytest

# ---------------------------------------------------------------------------
# Factory functions (plain functions, importable from conftest)
# ---------------------------------------------------------------------------


def make_request(**overrides: Any) -> ConversionRequest:
    """Build a valid ConversionRequest with sensible defaults."""
    defaults: dict[str, Any] = {"version": "v9", "seed": 12345, "mode": "normal"}
    defaults.update(overrides)
    return ConversionRequest(**defaults)


def make_config(**overrides: Any) -> ConverterConfig:
    """Build a valid ConverterConfig with sensible defaults."""
    defaults: dict[str, Any] = {}
    defaults.update(overrides)
    return ConverterConfig(**defaults)


def goal_names(count: int = 30) -> list[str]:
    """Return ``["Goal 1", ..., "Goal <count>"]``."""
    return [f"Goal {i}" for i in range(1, count + 1)]


def goal_list_script(names: list[str] | None = None) -> str:
    """A goal-list artifact declaring ``const bingoList`` as goal objects."""
    goals = [{"name": n, "types": ["misc"]} for n in (names if names is not None else goal_names())]
    return f"const bingoList = {json.dumps(goals)};\n"


NAMESPACED_GENERATOR = """
var BingoLibrary = (function () {
  function ootBingoGenerator(bingoList, options) {
    var board = [];
    for (var i = 0; i < 25; i++) {
      board.push({name: bingoList[i].name, types: bingoList[i].types});
    }
    return board;
  }
  return {ootBingoGenerator: ootBingoGenerator};
})();
"""

BARE_GENERATOR_WITH_METADATA = """
function ootBingoGenerator(bingoList, options) {
  var board = [{meta: {seed: options.seed}}];
  for (var i = 0; i < 25; i++) {
    board.push({name: bingoList[i].name});
  }
  return board;
}
"""

OPTIONS_ECHO_GENERATOR = """
var BingoLibrary = {
  ootBingoGenerator: function (bingoList, options) {
    var board = [{name: String(options.seed)}, {name: options.mode}, {name: options.lang}];
    for (var i = 3; i < 25; i++) { board.push(bingoList[i].name); }
    return board;
  }
};
"""


class FakeSite:
    """In-memory stand-in for the generator site, served through httpx.MockTransport.

    Attributes:
        pages: Mapping from path (relative to the base URL) to ``(status, body)``.
        hits: Number of requests seen per path.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self.base_url = base_url
        self.pages: dict[str, tuple[int, str]] = {}
        self.hits: dict[str, int] = {}

    def add(self, path: str, body: str, status: int = 200) -> None:
        self.pages[path] = (status, body)

    def add_manifest(self, versions: dict[str, str]) -> None:
        self.add("api/v1/available_versions.json", json.dumps({"versions": versions}))

    def add_release(self, path: str, generator: str, goal_list: str | None = None) -> None:
        self.add(f"{path}/goal-list.js", goal_list if goal_list is not None else goal_list_script())
        self.add(f"{path}/generator.js", generator)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = str(request.url).removeprefix(self.base_url + "/")
        self.hits[path] = self.hits.get(path, 0) + 1
        status, body = self.pages.get(path, (404, "not found"))
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_context(site: FakeSite, **config_overrides: Any) -> ConversionContext:
    """Build a fresh ConversionContext that talks to *site*.

    The random source is a no-op unless the test passes ``random_source``.
    """
    random_source = config_overrides.pop("random_source", NullRandomSource())
    return ConversionContext(
        make_config(**config_overrides),
        transport=site.transport,
        random_source=random_source,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def site() -> FakeSite:
    """Return an empty fake generator site."""
    return FakeSite()


@pytest.fixture()
def v9_site(site: FakeSite) -> FakeSite:
    """A fake site with manifest ``{"v9": "v9"}`` and a namespaced generator."""
    site.add_manifest({"v9": "v9"})
    site.add_release("v9", NAMESPACED_GENERATOR)
    return site
