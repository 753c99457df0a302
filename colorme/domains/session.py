from __future__ import annotations
import logging
import random
from typing import Dict, List, NamedTuple, Optional, Tuple

from colorme.domains.generator import GenerationResult, generate
from colorme.domains.grid import (
    Grid, Locks, Move, Position,
    apply_move, check_grid, clone_grid, decrement_locks, in_bounds, is_locked,
    is_winning_state, FORWARD,
)
from colorme.domains.levels import LevelParams, params_for_level
from colorme.search.bfs import SOLVED, UNSOLVABLE
from colorme.search.solver import DEFAULT_MAX_STATES, solve

logger = logging.getLogger(__name__)


class Snapshot(NamedTuple):
    grid: Tuple[Tuple[int, ...], ...]
    locked: Tuple[Tuple[Position, int], ...]
    moves: int
    player_moves: Tuple[Move, ...]


def _freeze(grid: Grid, locked: Locks) -> Tuple[Tuple[Tuple[int, ...], ...], Tuple[Tuple[Position, int], ...]]:
    return tuple(tuple(r) for r in grid), tuple(sorted(locked.items()))


class GameSession:
    """One level being played: current grid, locks, move history and undo stack."""

    def __init__(self, puzzle: GenerationResult, params: Optional[LevelParams] = None,
                 max_states: Optional[int] = DEFAULT_MAX_STATES):
        self.puzzle = puzzle
        self.params = params or puzzle.params
        self.level = self.params.level if self.params else 1
        self.colors = puzzle.colors
        self.max_undos = self.params.max_undos if self.params else -1
        self.max_states = max_states
        self.power = frozenset(puzzle.power)
        check_grid(puzzle.grid, self.colors)
        self._initial_grid, self._initial_locked = _freeze(puzzle.grid, dict(puzzle.locked))
        self.reset()

    @classmethod
    def start(cls, level: int = 1, seed: Optional[int] = None,
              rng: Optional[random.Random] = None,
              max_states: Optional[int] = DEFAULT_MAX_STATES, **options) -> "GameSession":
        puzzle = generate(level, rng=rng, seed=seed, **options)
        return cls(puzzle, params_for_level(level), max_states)

    def next_level(self, seed: Optional[int] = None, **options) -> "GameSession":
        return GameSession.start(self.level + 1, seed=seed, max_states=self.max_states, **options)

    # ---------- State ----------
    @property
    def size(self) -> int:
        return len(self.grid)

    @property
    def optimal_path(self) -> List[Move]:
        return self.puzzle.optimal_path

    @property
    def on_optimal_path(self) -> bool:
        opt = self.puzzle.optimal_path
        n = len(self.player_moves)
        return n <= len(opt) and all(
            m.position == o.position for m, o in zip(self.player_moves, opt))

    @property
    def undos_left(self) -> Optional[int]:
        if self.max_undos < 0:
            return None
        return max(0, self.max_undos - self.undo_count)

    def snapshot(self) -> Snapshot:
        grid, locked = _freeze(self.grid, self.locked)
        return Snapshot(grid, locked, self.moves, tuple(self.player_moves))

    # ---------- Actions ----------
    def click(self, row: int, col: int) -> bool:
        """Apply a player click; False (and no change) when it is not allowed."""
        if self.won or not in_bounds(self.size, row, col) or is_locked(self.locked, (row, col)):
            return False
        is_power = (row, col) in self.power
        self._undo.append(self.snapshot())
        self.grid = apply_move(self.grid, (row, col), self.colors, is_power, self.locked, FORWARD)
        self.locked = decrement_locks(self.locked)
        self.moves += 1
        self.player_moves.append(Move(row, col, is_power))
        self.won = is_winning_state(self.grid)
        logger.debug("click (%d, %d) power=%s move=%d on_optimal=%s",
                     row, col, is_power, self.moves, self.on_optimal_path)
        if self.won:
            logger.info("Level %d solved in %d moves (optimal %d)",
                        self.level, self.moves, len(self.puzzle.optimal_path))
        return True

    def undo(self) -> bool:
        if not self._undo:
            return False
        if self.max_undos >= 0 and self.undo_count >= self.max_undos:
            return False
        snap = self._undo.pop()
        self.grid = [list(r) for r in snap.grid]
        self.locked = dict(snap.locked)
        self.moves = snap.moves
        self.player_moves = list(snap.player_moves)
        self.won = is_winning_state(self.grid)
        self.undo_count += 1
        return True

    def reset(self) -> None:
        self.grid: Grid = [list(r) for r in self._initial_grid]
        self.locked: Dict[Position, int] = dict(self._initial_locked)
        self.moves = 0
        self.player_moves: List[Move] = []
        self._undo: List[Snapshot] = []
        self.undo_count = 0
        self.won = is_winning_state(self.grid)

    # ---------- Solver-backed queries ----------
    def _solve(self, **kwargs) -> dict:
        kwargs.setdefault("max_states", self.max_states)
        return solve(clone_grid(self.grid), self.power, self.locked, self.colors, **kwargs)

    def hint(self, **kwargs) -> Optional[Move]:
        if self.won:
            return None
        res = self._solve(**kwargs)
        if res["termination"] == SOLVED and res["path"]:
            return res["path"][0]
        return None

    def check_solvable(self, **kwargs) -> Optional[bool]:
        res = self._solve(**kwargs)
        if res["termination"] == SOLVED:
            return True
        if res["termination"] == UNSOLVABLE:
            logger.warning("Level %d is no longer solvable from the current grid", self.level)
            return False
        return None
