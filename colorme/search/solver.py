"""Shortest-solution search for arbitrary Color Me Same grids.

`solve` is the single entry point used for hints and solvability checks. It
always returns a result dict whose "termination" is one of:

- "solved":     "path" holds a shortest move list (empty when already won)
- "exhausted":  the state budget, deadline or cancellation callback stopped
                the search first; "reason" says which. Nothing is known
                about solvability, so callers should treat this as
                "hint unavailable".
- "unsolvable": every reachable state was visited without reaching a
                single-color grid.

The search space grows as colors ** (N * N), so a state budget is always
applied; pass max_states=None to lift it explicitly.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from colorme.domains.board import ColorBoard
from colorme.domains.errors import SolverExhausted, SolverUnsolvable
from colorme.domains.grid import Grid, Move, Position
from colorme.search.a_star import a_star
from colorme.search.bfs import BreadthFirstSearch, SOLVED, EXHAUSTED, UNSOLVABLE

logger = logging.getLogger(__name__)

DEFAULT_MAX_STATES = 200_000
ALGORITHMS = ("bfs", "astar")


def solve(grid: Grid,
          power: Iterable[Position] = (),
          locked: Optional[Mapping[Position, int]] = None,
          colors: int = 3,
          max_states: Optional[int] = DEFAULT_MAX_STATES,
          timeout_sec: float | None = None,
          should_cancel: Optional[Callable[[], bool]] = None,
          algorithm: str = "bfs") -> Dict[str, Any]:
    board = ColorBoard.from_grid(grid, colors, power, locked)
    start = board.encode(grid)
    if algorithm == "bfs":
        res = BreadthFirstSearch(start, board.is_goal, board.neighbors).run(
            max_states=max_states, timeout_sec=timeout_sec, should_cancel=should_cancel)
    elif algorithm == "astar":
        res = a_star(start, board.is_goal, board.color_deficit, board.neighbors,
                     max_states=max_states, timeout_sec=timeout_sec, should_cancel=should_cancel)
    else:
        raise ValueError(f"unknown algorithm {algorithm!r}; expected one of {ALGORITHMS}")
    logger.debug("%s on %dx%d/%d colors: %s (reason=%s) expanded=%d time=%.4fs",
                 res["algorithm"], board.N, board.N, colors, res["termination"],
                 res["reason"], res["expanded"], res["time"])
    return res


def next_hint(grid: Grid, power: Iterable[Position] = (),
              locked: Optional[Mapping[Position, int]] = None,
              colors: int = 3, **kwargs) -> Optional[Move]:
    """First move of a shortest solution, or None (won, unsolvable or out of budget)."""
    res = solve(grid, power, locked, colors, **kwargs)
    if res["termination"] == SOLVED and res["path"]:
        return res["path"][0]
    return None


def is_solvable(grid: Grid, power: Iterable[Position] = (),
                locked: Optional[Mapping[Position, int]] = None,
                colors: int = 3, **kwargs) -> Optional[bool]:
    """True / False, or None when the budget ran out before an answer."""
    res = solve(grid, power, locked, colors, **kwargs)
    if res["termination"] == SOLVED:
        return True
    if res["termination"] == UNSOLVABLE:
        return False
    return None


def ensure_solvable(grid: Grid, power: Iterable[Position] = (),
                    locked: Optional[Mapping[Position, int]] = None,
                    colors: int = 3, **kwargs) -> list:
    """Shortest path, raising SolverUnsolvable / SolverExhausted otherwise."""
    res = solve(grid, power, locked, colors, **kwargs)
    if res["termination"] == UNSOLVABLE:
        raise SolverUnsolvable(
            f"no single-color state reachable ({res['expanded']} states explored)", res)
    if res["termination"] == EXHAUSTED:
        raise SolverExhausted(
            f"search stopped by {res['reason']} after {res['expanded']} states", res)
    return res["path"]
