"""Conversion context: the state shared by conversions in one process.

A ``ConversionContext`` owns the resource cache, the legacy seeding library
"loaded" flag, the JavaScript runtime, and the random source provider. It
starts empty and needs no teardown. Callers that convert several boards keep
one context; tests build a fresh one per test.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bingo_convert.cache import ResourceCache
from bingo_convert.evaluator import ArtifactEvaluator, JSRuntime
from bingo_convert.models import ConverterConfig
from bingo_convert.random_source import NullRandomSource, SeedrandomSource

if TYPE_CHECKING:
    import httpx

    from bingo_convert.random_source import RandomSourceProvider

MANIFEST_PATH = "api/v1/available_versions.json"
GOAL_LIST_FILE = "goal-list.js"
GENERATOR_FILE = "generator.js"
SEEDRANDOM_PATH = "lib/seedrandom-min.js"


class ConversionContext:
    """Explicit holder for process-wide conversion state.

    Attributes:
        config: Converter configuration.
        cache: Text cache for every fetched resource.
        random_source: Provider preparing the JS random source before a
            generator runs.
        seeding_library_loaded: Set once the legacy seeding library has been
            installed into ``runtime``.
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        random_source: RandomSourceProvider | None = None,
        runtime: JSRuntime | None = None,
    ) -> None:
        self.config = config if config is not None else ConverterConfig()
        self.cache = ResourceCache(
            timeout_seconds=self.config.request_timeout_seconds,
            headers={"User-Agent": self.config.user_agent},
            transport=transport,
        )
        if random_source is None:
            random_source = SeedrandomSource() if self.config.load_seeding_library else NullRandomSource()
        self.random_source = random_source
        self.seeding_library_loaded = False
        self._runtime = runtime

    @property
    def runtime(self) -> JSRuntime:
        """The JavaScript runtime, created on first use."""
        if self._runtime is None:
            self._runtime = JSRuntime(timeout_ms=self.config.script_timeout_ms)
        return self._runtime

    @property
    def evaluator(self) -> ArtifactEvaluator:
        return ArtifactEvaluator(self.runtime)

    def url(self, path: str) -> str:
        """Absolute URL of *path* under the configured base URL."""
        return f"{self.config.base_url}/{path.strip('/')}"

    def manifest_url(self) -> str:
        return self.url(MANIFEST_PATH)

    def artifact_url(self, version_path: str, filename: str) -> str:
        return self.url(f"{version_path.strip('/')}/{filename}")

    def seedrandom_url(self) -> str:
        return self.url(SEEDRANDOM_PATH)
