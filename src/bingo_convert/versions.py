"""Version resolution against the generator's version manifest."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from bingo_convert.errors import FormatError, VersionNotFoundError
from bingo_convert.models import VersionManifest

if TYPE_CHECKING:
    from bingo_convert.context import ConversionContext

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 8


def parse_manifest(text: str) -> VersionManifest:
    """Parse a manifest document of the form ``{"versions": {id: path}}``.

    Raises:
        FormatError: If the text is not JSON or lacks a ``versions`` mapping
            of strings.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Version manifest is not valid JSON: {exc}"
        raise FormatError(msg) from exc
    if not isinstance(data, dict):
        msg = "Version manifest must be a JSON object"
        raise FormatError(msg)
    try:
        return VersionManifest(versions=data.get("versions"))
    except ValidationError as exc:
        msg = "Version manifest has no valid 'versions' mapping"
        raise FormatError(msg) from exc


class VersionResolver:
    """Maps version identifiers to artifact paths using the cached manifest.

    The manifest is fetched once per context and never refreshed.
    """

    def __init__(self, context: ConversionContext) -> None:
        self._context = context

    async def fetch_manifest(self) -> VersionManifest:
        text = await self._context.cache.fetch_text(self._context.manifest_url())
        return parse_manifest(text)

    async def resolve(self, version: str) -> str:
        """Return the artifact path for *version*.

        Raises:
            NetworkError: If the manifest cannot be fetched.
            FormatError: If the manifest is malformed.
            VersionNotFoundError: If *version* is unknown or maps to an empty
                path. The message lists at most ``MAX_SUGGESTIONS`` known
                versions followed by an ellipsis.
        """
        manifest = await self.fetch_manifest()
        path = manifest.versions.get(version)
        if not path:
            available = manifest.suggestions(MAX_SUGGESTIONS)
            msg = f'Version "{version}" was not found. Available versions include: {", ".join(available)}…'
            raise VersionNotFoundError(msg, version=version, available=available)
        logger.info("Resolved version %s to %s", version, path)
        return path
