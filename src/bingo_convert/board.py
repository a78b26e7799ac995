"""Board normalization and export.

Generator releases disagree on whether the first element of their result is
a real goal or a metadata placeholder. ``normalize_board`` detects the
indexing offset, takes exactly 25 goals and maps each to a ``BoardCell``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
from typing import Any

from bingo_convert.errors import FormatError
from bingo_convert.models import BOARD_SIZE, BoardCell

GRID_WIDTH = 5


def detect_offset(board_raw: Sequence[Any]) -> int:
    """Return 0 if element 0 is a goal with a non-empty name, else 1.

    A bare string at index 0 is treated as metadata: only goal objects can
    mark a board as 0-indexed.
    """
    if board_raw:
        first = board_raw[0]
        if isinstance(first, Mapping) and first.get("name"):
            return 0
    return 1


def _to_cell(goal: Any, position: int) -> BoardCell:
    if isinstance(goal, str):
        return BoardCell(name=goal)
    name = goal.get("name") if isinstance(goal, Mapping) else None
    if not isinstance(name, str):
        msg = f"Goal at position {position} has no name; goals must be strings or objects with a string name."
        raise FormatError(msg)
    return BoardCell(name=name)


def normalize_board(board_raw: Any) -> list[BoardCell]:
    """Turn a raw generator result into exactly 25 cells in reading order.

    Args:
        board_raw: The generator result projected to Python.

    Returns:
        25 ``BoardCell`` objects, row-major.

    Raises:
        FormatError: If *board_raw* is not a list, has fewer than 25 goals
            after the offset, or contains a goal without a string name.
    """
    if not isinstance(board_raw, (list, tuple)):
        msg = "Generator returned an unexpected result format."
        raise FormatError(msg)

    offset = detect_offset(board_raw)
    goals = board_raw[offset : offset + BOARD_SIZE]
    if len(goals) != BOARD_SIZE:
        msg = f"Expected {BOARD_SIZE} goals but found {len(goals)}. The version format may be unsupported."
        raise FormatError(msg, expected=BOARD_SIZE, found=len(goals))

    return [_to_cell(goal, position) for position, goal in enumerate(goals, start=1)]


def board_to_json(cells: Sequence[BoardCell], indent: int | None = 2) -> str:
    """Serialize cells as the JSON array Bingosync accepts."""
    return json.dumps([cell.model_dump() for cell in cells], indent=indent, ensure_ascii=False)


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


def render_board_grid(cells: Sequence[BoardCell], cell_width: int = 18) -> str:
    """Render the board as a 5-column text grid, truncating long names."""
    border = "+" + "+".join("-" * (cell_width + 2) for _ in range(GRID_WIDTH)) + "+"
    lines = [border]
    for row_start in range(0, len(cells), GRID_WIDTH):
        row = cells[row_start : row_start + GRID_WIDTH]
        names = [_truncate(cell.name, cell_width) for cell in row]
        lines.append("| " + " | ".join(name.ljust(cell_width) for name in names) + " |")
        lines.append(border)
    return "\n".join(lines)
