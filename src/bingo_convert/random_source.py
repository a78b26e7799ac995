"""Random source providers for generator releases.

Older generator releases expect ``Math.seedrandom`` to be installed in the
global scope by the shared ``seedrandom`` library; newer bundles carry their
own copy. ``SeedrandomSource`` installs the library once per context on a
best-effort basis, ``NullRandomSource`` does nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bingo_convert.errors import ConversionError

if TYPE_CHECKING:
    from bingo_convert.context import ConversionContext

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSourceProvider(Protocol):
    """Prepares the JavaScript random source before a generator runs."""

    async def prepare(self, context: ConversionContext) -> None: ...  # noqa: D102


class NullRandomSource:
    """Leaves the JavaScript random source untouched."""

    async def prepare(self, context: ConversionContext) -> None:
        return None


class SeedrandomSource:
    """Installs the shared ``seedrandom`` library into the runtime's globals.

    Loading happens at most once per context. Failures are logged and
    ignored: the flag stays unset, so the next conversion tries again.
    """

    async def prepare(self, context: ConversionContext) -> None:
        """Ensure the seeding library is loaded, swallowing any failure."""
        if context.seeding_library_loaded:
            return

        url = context.seedrandom_url()
        try:
            source = await context.cache.fetch_text(url)
            context.runtime.execute(source)
        except ConversionError as exc:
            logger.warning("Seeding library not loaded (%s); continuing without it", exc)
            return

        context.seeding_library_loaded = True
        logger.debug("Seeding library loaded from %s", url)
