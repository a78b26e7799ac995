"""Core data models for board conversion.

Defines the shared Pydantic models used across the pipeline: the parsed
conversion request, the version manifest, the canonical board cell, and the
converter configuration.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DEFAULT_MODE = "normal"
DEFAULT_BASE_URL = "https://ootbingo.github.io/bingo"
DEFAULT_EXPECTED_HOST = "ootbingo.github.io"
DEFAULT_BINGOSYNC_URL = "https://bingosync.com"

BOARD_SIZE = 25


class ConversionRequest(BaseModel):
    """Parameters of one board conversion.

    Attributes:
        version: Generator version identifier (e.g. ``"v10.5"``).
        seed: Integer seed passed to the generator.
        mode: Generator mode; ``"normal"`` when the link does not carry one.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    seed: int
    mode: str = DEFAULT_MODE

    @field_validator("version")
    @classmethod
    def _version_not_blank(cls, v: str) -> str:
        """Reject empty version identifiers."""
        if not v:
            msg = "version must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("mode")
    @classmethod
    def _mode_defaults_to_normal(cls, v: str) -> str:
        """Treat an empty mode like an absent one."""
        return v or DEFAULT_MODE


class VersionManifest(BaseModel):
    """Mapping from version identifier to artifact path.

    Key order is the order of the manifest document and is kept for
    suggestion lists.
    """

    model_config = ConfigDict(frozen=True)

    versions: dict[str, str]

    def suggestions(self, limit: int) -> list[str]:
        """Return the first *limit* version identifiers in manifest order."""
        return list(self.versions)[:limit]


class BoardCell(BaseModel):
    """A single goal on the exported board."""

    model_config = ConfigDict(frozen=True)

    name: str


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConverterConfig(BaseModel):
    """Converter configuration.

    Attributes:
        base_url: Root URL of the generator site, without trailing slash.
        expected_host: Domain that submitted links must belong to; defaults
            to the host of ``base_url``.
        request_timeout_seconds: HTTP timeout, ``None`` to wait forever.
        script_timeout_ms: Per-evaluation JavaScript timeout, ``None`` for none.
        load_seeding_library: Whether to load the legacy ``seedrandom`` library
            into the JavaScript global scope before running generators.
        user_agent: ``User-Agent`` header sent with every request.
        bingosync_url: Page opened by ``--open-bingosync``.
        log_level: Logging level name.
        log_file: Optional log file path.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    expected_host: str = DEFAULT_EXPECTED_HOST
    request_timeout_seconds: float | None = 30.0
    script_timeout_ms: int | None = 10_000
    load_seeding_library: bool = True
    user_agent: str = "bingo-convert/0.1"
    bingosync_url: str = DEFAULT_BINGOSYNC_URL
    log_level: str = "INFO"
    log_file: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_host_from_base_url(cls, data: Any) -> Any:
        """Links are expected on the host that serves the generator."""
        if isinstance(data, dict) and data.get("expected_host") is None and data.get("base_url"):
            host = urlsplit(str(data["base_url"])).hostname
            if host:
                data = {**data, "expected_host": host}
        return data

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        """Normalize ``base_url`` so paths can be joined with a single slash."""
        stripped = v.rstrip("/")
        if not stripped:
            msg = "base_url must not be empty"
            raise ValueError(msg)
        return stripped

    @field_validator("expected_host")
    @classmethod
    def _lowercase_host(cls, v: str) -> str:
        """Hostnames compare case-insensitively."""
        return v.lower()

    @field_validator("request_timeout_seconds", "script_timeout_ms")
    @classmethod
    def _positive_timeout(cls, v: float | None) -> float | None:
        """Timeouts must be positive when set."""
        if v is not None and v <= 0:
            msg = "Timeout must be > 0"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, v: str) -> str:
        """Accept only standard logging level names (case-insensitive)."""
        upper = v.upper()
        if upper not in _LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {v!r}"
            raise ValueError(msg)
        return upper

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for ``log_level``."""
        return int(getattr(logging, self.log_level))
