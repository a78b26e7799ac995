"""Generator link parsing and construction.

Turns a shareable generator link into a ``ConversionRequest`` and back, and
derives the file name used when a board is saved to disk.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlencode, urlsplit

from pydantic import ValidationError

from bingo_convert.errors import LinkValidationError
from bingo_convert.models import (
    DEFAULT_BASE_URL,
    DEFAULT_EXPECTED_HOST,
    DEFAULT_MODE,
    ConversionRequest,
)

# Leading integer the way ``parseInt(s, 10)`` reads it.
_LEADING_INT: re.Pattern[str] = re.compile(r"\s*([+-]?[0-9]+)")


def parse_seed(raw: str) -> int:
    """Parse a seed string with ``parseInt``-like leniency.

    Leading whitespace and an optional sign are allowed; anything after the
    leading digits is ignored (``"123abc"`` is 123).

    Raises:
        LinkValidationError: If *raw* does not start with an integer.
    """
    match = _LEADING_INT.match(raw)
    if match is None:
        msg = '"seed" is not a valid number.'
        raise LinkValidationError(msg, diagnostics={"seed": raw})
    return int(match.group(1))


def _host_matches(hostname: str, expected_host: str) -> bool:
    return hostname == expected_host or hostname.endswith("." + expected_host)


def _first_param(params: dict[str, list[str]], name: str) -> str | None:
    values = params.get(name)
    return values[0] if values else None


def parse_bingo_link(raw: str, *, expected_host: str = DEFAULT_EXPECTED_HOST) -> ConversionRequest:
    """Validate a generator link and extract its conversion parameters.

    The scheme may be omitted (``ootbingo.github.io/bingo/...`` is accepted).
    The host must be *expected_host* or one of its subdomains; ``version``
    and ``seed`` are required and ``mode`` defaults to ``"normal"``.

    Args:
        raw: The link as typed or pasted by the user.
        expected_host: Domain the link must belong to.

    Returns:
        The parsed, immutable request.

    Raises:
        LinkValidationError: If the link is empty, unparseable, from another
            host, or missing or carrying invalid parameters.
    """
    trimmed = raw.strip()
    if not trimmed:
        msg = "Please enter an OoT Bingo URL."
        raise LinkValidationError(msg)

    candidate = trimmed if "://" in trimmed else "https://" + trimmed
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
    except ValueError as exc:
        msg = "That doesn't look like a valid URL."
        raise LinkValidationError(msg, diagnostics={"link": trimmed}) from exc
    if not hostname or " " in hostname:
        msg = "That doesn't look like a valid URL."
        raise LinkValidationError(msg, diagnostics={"link": trimmed})

    if not _host_matches(hostname, expected_host.lower()):
        msg = f"URL must come from {expected_host}."
        raise LinkValidationError(msg, diagnostics={"host": hostname})

    params = parse_qs(parts.query)
    version = _first_param(params, "version")
    seed_str = _first_param(params, "seed")
    mode = _first_param(params, "mode") or DEFAULT_MODE

    if not version:
        msg = 'URL is missing the "version" parameter.'
        raise LinkValidationError(msg)
    if not seed_str:
        msg = 'URL is missing the "seed" parameter.'
        raise LinkValidationError(msg)

    seed = parse_seed(seed_str)
    try:
        return ConversionRequest(version=version, seed=seed, mode=mode)
    except ValidationError as exc:
        msg = f"Invalid link parameters: {exc}"
        raise LinkValidationError(msg) from exc


def build_bingo_link(
    version: str,
    seed: int | str,
    mode: str = DEFAULT_MODE,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """Build the generator page link for the given parameters."""
    query = urlencode({"version": version, "seed": str(seed), "mode": mode or DEFAULT_MODE})
    return f"{base_url.rstrip('/')}/bingo.html?{query}"


def export_filename(request: ConversionRequest) -> str:
    """File name for a saved board, e.g. ``oot-bingo-v10.5-normal-12345.json``."""
    return f"oot-bingo-{request.version}-{request.mode}-{request.seed}.json"
