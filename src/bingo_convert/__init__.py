"""Convert OoT Bingo generator links into Bingosync custom boards."""

from bingo_convert.board import board_to_json, normalize_board, render_board_grid
from bingo_convert.context import ConversionContext
from bingo_convert.converter import BoardConverter, configure_logging, convert, convert_link, convert_sync
from bingo_convert.errors import (
    ConversionError,
    FormatError,
    GeneratorRuntimeError,
    LinkValidationError,
    NetworkError,
    UnsupportedVersionError,
    VersionNotFoundError,
)
from bingo_convert.links import build_bingo_link, export_filename, parse_bingo_link
from bingo_convert.models import BoardCell, ConversionRequest, ConverterConfig

__all__ = [
    "BoardCell",
    "BoardConverter",
    "ConversionContext",
    "ConversionError",
    "ConversionRequest",
    "ConverterConfig",
    "FormatError",
    "GeneratorRuntimeError",
    "LinkValidationError",
    "NetworkError",
    "UnsupportedVersionError",
    "VersionNotFoundError",
    "board_to_json",
    "build_bingo_link",
    "configure_logging",
    "convert",
    "convert_link",
    "convert_sync",
    "export_filename",
    "normalize_board",
    "parse_bingo_link",
    "render_board_grid",
]
