"""CLI entry point for the board converter.

Provides ``main()`` as the console-script entry point registered in
``pyproject.toml`` as ``bingo_convert = "bingo_convert.cli:main"``. Takes a
generator link (or ``--version``/``--seed``/``--mode``), converts it, and
writes the Bingosync JSON to stdout or a file.
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys
import webbrowser

from pydantic import ValidationError
import yaml

from bingo_convert.board import board_to_json, render_board_grid
from bingo_convert.context import ConversionContext
from bingo_convert.converter import BoardConverter, configure_logging
from bingo_convert.errors import ConversionError
from bingo_convert.links import build_bingo_link, export_filename
from bingo_convert.models import BoardCell, ConversionRequest, ConverterConfig


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="bingo_convert",
        description="Convert an OoT Bingo generator link into a Bingosync custom board.",
    )
    parser.add_argument(
        "link",
        nargs="?",
        default=None,
        help="Generator link, e.g. https://ootbingo.github.io/bingo/bingo.html?version=v10.5&seed=1",
    )
    parser.add_argument("--version", dest="version", default=None, help="Generator version (instead of a link).")
    parser.add_argument("--seed", default=None, help="Board seed (instead of a link).")
    parser.add_argument("--mode", default="normal", help="Generator mode (default: normal).")
    parser.add_argument("--config", default=None, help="Path to an optional ConverterConfig YAML file.")
    parser.add_argument(
        "--output",
        default=None,
        help="Write the JSON to this file; a directory gets oot-bingo-<version>-<mode>-<seed>.json.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2).")
    parser.add_argument("--preview", action="store_true", help="Print a 5x5 preview of the board to stderr.")
    parser.add_argument(
        "--open-bingosync",
        action="store_true",
        help="Open Bingosync in a browser after converting.",
    )
    return parser


def _load_config(path: str | None) -> ConverterConfig:
    """Build the converter config from an optional YAML file.

    An empty file yields the defaults; any other document must be a mapping
    of ``ConverterConfig`` fields.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the document is not a mapping.
    """
    if path is None:
        return ConverterConfig()
    config_path = Path(path)
    if not config_path.is_file():
        msg = f"config file not found: {path}"
        raise FileNotFoundError(msg)

    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if data is None:
        return ConverterConfig()
    if not isinstance(data, dict):
        msg = f"config file must contain a mapping of settings, got {type(data).__name__}"
        raise ValueError(msg)
    return ConverterConfig(**data)


def _resolve_link(args: argparse.Namespace, config: ConverterConfig, parser: argparse.ArgumentParser) -> str:
    """Return the link to convert, synthesizing one from bare parameters."""
    if args.link is not None:
        return str(args.link)
    if args.version is None or args.seed is None:
        parser.error("either LINK or both --version and --seed are required")
    return build_bingo_link(args.version, args.seed, args.mode, base_url=config.base_url)


def _print_summary(request: ConversionRequest, cells: list[BoardCell]) -> None:
    print(
        f"Version {request.version} | Seed {request.seed} | Mode {request.mode} | ({len(cells)} goals)",
        file=sys.stderr,
    )


def _write_output(target: str, request: ConversionRequest, text: str) -> Path:
    path = Path(target)
    if path.is_dir():
        path = path / export_filename(request)
    path.write_text(text + "\n", encoding="utf-8")
    return path


def main(argv: list[str] | None = None) -> int:
    """Entry point for the bingo_convert CLI.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config)
    link = _resolve_link(args, config, parser)
    converter = BoardConverter(ConversionContext(config))

    try:
        request, cells = asyncio.run(converter.convert_link(link))
    except ConversionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    text = board_to_json(cells, indent=args.indent)
    _print_summary(request, cells)
    if args.preview:
        print(render_board_grid(cells), file=sys.stderr)

    if args.output is not None:
        try:
            written = _write_output(args.output, request, text)
        except OSError as exc:
            print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
            return 1
        print(f"Saved board to {written}", file=sys.stderr)
    else:
        print(text)

    if args.open_bingosync:
        webbrowser.open(config.bingosync_url, new=2)
        print("Opened Bingosync. Paste the JSON as a custom board.", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
