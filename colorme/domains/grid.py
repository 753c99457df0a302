from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from colorme.domains.errors import InvalidGrid

Grid = List[List[int]]
Position = Tuple[int, int]  # (row, col), 0-based
Locks = Dict[Position, int]

FORWARD = 1
INVERSE = -1

# Offsets of the cells a click affects, in application order
PLUS_OFFSETS: Tuple[Position, ...] = ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1))
POWER_OFFSETS: Tuple[Position, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1)
)


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    power: bool = False

    @property
    def position(self) -> Position:
        return (self.row, self.col)


# ---------- Helpers ----------
def clone_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def all_positions(size: int) -> List[Position]:
    """Row-major list of every position on a size×size board."""
    return [(r, c) for r in range(size) for c in range(size)]


def in_bounds(size: int, row: int, col: int) -> bool:
    return 0 <= row < size and 0 <= col < size


def affected_positions(size: int, row: int, col: int, is_power: bool = False) -> List[Position]:
    """Cells hit by a click at (row, col); offsets falling off the board are dropped."""
    offsets = POWER_OFFSETS if is_power else PLUS_OFFSETS
    out: List[Position] = []
    for dr, dc in offsets:
        nr, nc = row + dr, col + dc
        if in_bounds(size, nr, nc):
            out.append((nr, nc))
    return out


def is_locked(locked: Optional[Mapping[Position, int]], pos: Position) -> bool:
    return bool(locked) and locked.get(pos, 0) > 0


def check_grid(grid: Grid, colors: Optional[int] = None) -> int:
    """Validate shape (and color range when `colors` is given); returns N."""
    n = len(grid)
    if n == 0:
        raise InvalidGrid("grid is empty")
    for r, row in enumerate(grid):
        if len(row) != n:
            raise InvalidGrid(f"row {r} has {len(row)} cells, expected {n}")
        if colors is not None:
            for c, v in enumerate(row):
                if not 0 <= v < colors:
                    raise InvalidGrid(f"cell ({r}, {c}) = {v} outside [0, {colors})")
    return n


# ---------- Core dynamics ----------
def apply_move(
    grid: Grid,
    position: Position,
    colors: int,
    is_power: bool = False,
    locked: Optional[Mapping[Position, int]] = None,
    direction: int = FORWARD,
) -> Grid:
    """Return a new grid with one click applied.

    FORWARD adds 1 (mod colors) to every affected cell, INVERSE subtracts 1.
    Cells with a positive lock count are left untouched, including the
    clicked cell itself. The input grid is never mutated.
    """
    if direction not in (FORWARD, INVERSE):
        raise ValueError(f"direction must be FORWARD or INVERSE, got {direction!r}")
    n = len(grid)
    out = clone_grid(grid)
    row, col = position
    for pos in affected_positions(n, row, col, is_power):
        if is_locked(locked, pos):
            continue
        r, c = pos
        out[r][c] = (out[r][c] + direction) % colors
    return out


def apply_click(grid: Grid, row: int, col: int, colors: int,
                is_power: bool = False, locked: Optional[Mapping[Position, int]] = None) -> Grid:
    return apply_move(grid, (row, col), colors, is_power, locked, FORWARD)


def apply_reverse_click(grid: Grid, row: int, col: int, colors: int,
                        is_power: bool = False, locked: Optional[Mapping[Position, int]] = None) -> Grid:
    """Inverse of apply_click; used to scramble from a solved board."""
    return apply_move(grid, (row, col), colors, is_power, locked, INVERSE)


def is_winning_state(grid: Grid) -> bool:
    if not grid or not grid[0]:
        return False
    target = grid[0][0]
    return all(cell == target for row in grid for cell in row)


def decrement_locks(locked: Optional[Mapping[Position, int]]) -> Locks:
    """One player move elapsed: every count drops by one, zeros are removed."""
    if not locked:
        return {}
    return {pos: v - 1 for pos, v in locked.items() if v > 1}


def uniform_grid(size: int, color: int = 0) -> Grid:
    return [[color] * size for _ in range(size)]
