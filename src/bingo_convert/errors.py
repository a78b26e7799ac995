"""Error taxonomy for board conversion.

Every pipeline stage raises a subclass of ``ConversionError`` and lets it
propagate unchanged to the caller. Each error carries a single
human-readable message plus a ``diagnostics`` dict with structured context.
"""

from __future__ import annotations

from typing import Any


class ConversionError(Exception):
    """Board conversion failure with diagnostic context.

    Attributes:
        diagnostics: Structured information about the failure.
    """

    def __init__(self, message: str, *, diagnostics: dict[str, Any] | None = None) -> None:
        """Initialize with a message and optional structured diagnostics.

        Args:
            message: Human-readable error description.
            diagnostics: Structured context (URL, status, counts, ...).
        """
        super().__init__(message)
        self.diagnostics: dict[str, Any] = dict(diagnostics or {})


class LinkValidationError(ConversionError):
    """The submitted link or its parameters are malformed."""


class NetworkError(ConversionError):
    """A resource could not be fetched.

    Attributes:
        status_code: HTTP status of the failed response, or ``None`` when the
            request never produced a response.
        url: The requested URL.
    """

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        """Initialize with the failing URL and optional HTTP status."""
        super().__init__(message, diagnostics={"url": url, "status_code": status_code})
        self.url = url
        self.status_code = status_code


class VersionNotFoundError(ConversionError):
    """The requested version is not listed in the version manifest.

    Attributes:
        version: The version identifier that was requested.
        available: The (truncated) list of suggested identifiers.
    """

    def __init__(self, message: str, *, version: str, available: list[str]) -> None:
        """Initialize with the missing version and the suggestion list."""
        super().__init__(message, diagnostics={"version": version, "available": available})
        self.version = version
        self.available = available


class GeneratorRuntimeError(ConversionError):
    """A fetched script threw, timed out, or did not expose an expected value."""


class UnsupportedVersionError(GeneratorRuntimeError):
    """No known generator shape matched the evaluated generator script."""


class FormatError(ConversionError):
    """A document or generator result does not have the expected shape.

    Attributes:
        expected: Expected element count, when the failure is a size mismatch.
        found: Observed element count, when the failure is a size mismatch.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: int | None = None,
        found: int | None = None,
    ) -> None:
        """Initialize with optional expected/found counts."""
        super().__init__(message, diagnostics={"expected": expected, "found": found})
        self.expected = expected
        self.found = found
