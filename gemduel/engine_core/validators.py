"""
Validators - Geometry checks for gem selections.

A selection is valid when its cells lie on one row, column or diagonal,
span at most 3 cells, and (for 3 gems) are contiguous. Two gems with one
empty cell between them are reported as a gap, which TAKE_GEMS rejects.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from .constants import GRID_SIZE


@dataclass(frozen=True)
class SelectionCheck:
    valid: bool
    has_gap: bool = False
    error: str | None = None


def validate_gem_selection(coords: Iterable[tuple[int, int]]) -> SelectionCheck:
    """Check the shape of a selection of (row, col) cells."""
    cells = sorted(coords)
    if len(cells) <= 1:
        return SelectionCheck(valid=True)

    (r0, c0), (r1, c1) = cells[0], cells[-1]
    dr, dc = r1 - r0, c1 - c0
    if not (dr == 0 or dc == 0 or abs(dr) == abs(dc)):
        return SelectionCheck(valid=False, error="Must be in a straight line.")

    span = max(abs(dr), abs(dc))
    if span > 2:
        return SelectionCheck(valid=False, error="Too far apart (Max 3 gems).")

    if len(cells) == 3:
        mr, mc = cells[1]
        if mr * 2 != r0 + r1 or mc * 2 != c0 + c1:
            return SelectionCheck(valid=False, error="Gems must be contiguous.")

    return SelectionCheck(valid=True, has_gap=len(cells) == 2 and span == 2)


def parse_coords(raw: Iterable) -> list[tuple[int, int]]:
    """Accept [{"r": .., "c": ..}] or [(r, c)] coordinate lists."""
    out = []
    for item in raw or []:
        if isinstance(item, dict):
            out.append((int(item["r"]), int(item["c"])))
        else:
            r, c = item
            out.append((int(r), int(c)))
    return out


def on_board(r: int, c: int) -> bool:
    return 0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE
