"""Conversion pipeline: link to 25-cell board.

Provides ``BoardConverter`` and the ``convert()`` / ``convert_link()`` async
entry points plus ``convert_sync()`` for synchronous callers. Stages run in
order: version resolution, goal list, random source preparation, generator
location, generator invocation, board normalization. The first error from
any stage propagates unchanged; no partial board is ever returned.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from bingo_convert.board import normalize_board
from bingo_convert.context import GENERATOR_FILE, GOAL_LIST_FILE, ConversionContext
from bingo_convert.errors import GeneratorRuntimeError
from bingo_convert.generators import KNOWN_GENERATOR_SHAPES, GeneratorShape, invoke_generator, locate_generator
from bingo_convert.links import parse_bingo_link
from bingo_convert.models import BoardCell, ConversionRequest, ConverterConfig
from bingo_convert.versions import VersionResolver

logger = logging.getLogger(__name__)

GOAL_LIST_BINDING = "bingoList"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"


def configure_logging(config: ConverterConfig) -> None:
    """Configure the ``bingo_convert`` logger.

    Adds a console handler and, when ``config.log_file`` is set, a file
    handler. Idempotent: repeated calls do not duplicate handlers.
    """
    pkg_logger = logging.getLogger("bingo_convert")
    pkg_logger.setLevel(config.log_level_value)

    if not any(type(h) is logging.StreamHandler for h in pkg_logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(_LOG_FORMAT))
        pkg_logger.addHandler(console)

    if config.log_file is not None:
        target = str(Path(config.log_file).resolve())
        has_file = any(
            isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target
            for h in pkg_logger.handlers
        )
        if not has_file:
            file_handler = logging.FileHandler(config.log_file)
            file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            pkg_logger.addHandler(file_handler)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class BoardConverter:
    """Runs conversions against one ``ConversionContext``.

    Only one conversion may be in flight per converter at a time; callers
    must not start a second one before the first completes.
    """

    def __init__(
        self,
        context: ConversionContext | None = None,
        *,
        shapes: tuple[GeneratorShape, ...] = KNOWN_GENERATOR_SHAPES,
    ) -> None:
        self.context = context if context is not None else ConversionContext()
        self.resolver = VersionResolver(self.context)
        self.shapes = shapes

    async def convert(self, request: ConversionRequest) -> list[BoardCell]:
        """Generate the board for *request*.

        Returns:
            25 cells in reading order.

        Raises:
            NetworkError: A resource could not be fetched.
            VersionNotFoundError: The version is not in the manifest.
            GeneratorRuntimeError: An artifact threw or lacks the expected
                binding; ``UnsupportedVersionError`` when no generator shape
                matched.
            FormatError: The manifest or the generator result is malformed.
        """
        ctx = self.context
        logger.info("Converting version=%s seed=%d mode=%s", request.version, request.seed, request.mode)
        version_path = await self.resolver.resolve(request.version)

        runtime = ctx.runtime
        try:
            goal_list_text = await ctx.cache.fetch_text(ctx.artifact_url(version_path, GOAL_LIST_FILE))
            goal_list = ctx.evaluator.evaluate(goal_list_text, GOAL_LIST_BINDING)
            if not goal_list.is_truthy:
                msg = f"Goal list failed to load ({GOAL_LIST_BINDING} is undefined)."
                raise GeneratorRuntimeError(msg)

            await ctx.random_source.prepare(ctx)

            generator_text = await ctx.cache.fetch_text(ctx.artifact_url(version_path, GENERATOR_FILE))
            scope = ctx.evaluator.load(generator_text)
            located = locate_generator(scope, self.shapes)
            board_raw = invoke_generator(runtime, located, goal_list, request)
        finally:
            runtime.clear_refs()

        cells = normalize_board(board_raw)
        logger.info("Generated %d goals for version %s", len(cells), request.version)
        return cells

    async def convert_link(self, link: str) -> tuple[ConversionRequest, list[BoardCell]]:
        """Parse *link* and convert it; returns the request with the board."""
        request = parse_bingo_link(link, expected_host=self.context.config.expected_host)
        return request, await self.convert(request)


async def convert(request: ConversionRequest, context: ConversionContext | None = None) -> list[BoardCell]:
    """Convert *request* using *context* (a fresh one when ``None``)."""
    return await BoardConverter(context).convert(request)


async def convert_link(link: str, context: ConversionContext | None = None) -> list[BoardCell]:
    """Convert a generator link using *context* (a fresh one when ``None``)."""
    _, cells = await BoardConverter(context).convert_link(link)
    return cells


def convert_sync(request: ConversionRequest, context: ConversionContext | None = None) -> list[BoardCell]:
    """Synchronous wrapper for ``convert()`` via ``asyncio.run()``."""
    return asyncio.run(convert(request, context))
