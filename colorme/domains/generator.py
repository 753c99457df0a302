"""Reverse-move puzzle generation.

Starting from an all-zero board, `moves` random clicks are applied with the
INVERSE transition. Replaying the same clicks FORWARD in reverse order undoes
them exactly, so every generated puzzle ships with a known solution. That
path is not necessarily the shortest; use the solver when a shortest one is
needed.

Power and locked tiles are off by default. When they are requested each
attempt is replayed with lock countdown and solved; `optimal_path` becomes the
solver's path when that one is shorter, so it no longer has to equal the
reversed scramble. Attempts the solver cannot finish within `max_states` are
regenerated, up to `max_retries` times.
"""
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from colorme.domains.errors import GenerationExhausted
from colorme.domains.grid import (
    Grid, Locks, Move, Position,
    all_positions, apply_move, clone_grid, decrement_locks,
    is_locked, is_winning_state, uniform_grid, FORWARD, INVERSE,
)
from colorme.domains.levels import LevelParams, params_for_level
from colorme.search.bfs import SOLVED
from colorme.search.solver import solve

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 10
DEFAULT_LOCK_MOVES = (2, 4)
VERIFY_MAX_STATES = 50_000


@dataclass
class GenerationResult:
    grid: Grid
    solved: Grid
    power: FrozenSet[Position]
    locked: Dict[Position, int]
    optimal_path: List[Move]
    reverse_history: List[Move]
    colors: int
    params: Optional[LevelParams] = None
    attempts: int = 1

    @property
    def size(self) -> int:
        return len(self.grid)


def replay(grid: Grid, path: Sequence[Move], colors: int,
           locked: Optional[Mapping[Position, int]] = None) -> Tuple[Grid, Locks, int]:
    """Play `path` forward with play rules.

    Clicks on locked cells are refused (and do not count as moves); every
    accepted click decrements all locks. Returns (grid, locks, accepted).
    """
    g = clone_grid(grid)
    locks: Locks = dict(locked or {})
    accepted = 0
    for m in path:
        if is_locked(locks, m.position):
            continue
        g = apply_move(g, m.position, colors, m.power, locks, FORWARD)
        locks = decrement_locks(locks)
        accepted += 1
    return g, locks, accepted


def _place_power(size: int, count: int, rng: random.Random) -> FrozenSet[Position]:
    cand = all_positions(size)
    rng.shuffle(cand)
    return frozenset(cand[:min(count, len(cand))])


def _place_locks(size: int, count: int, path: Sequence[Move], power: FrozenSet[Position],
                 lock_moves: Tuple[int, int], rng: random.Random) -> Dict[Position, int]:
    on_path = {m.position for m in path}
    cand = [p for p in all_positions(size) if p not in on_path and p not in power]
    locked: Dict[Position, int] = {}
    lo, hi = lock_moves
    for _ in range(min(count, len(cand))):
        p = cand.pop(rng.randrange(len(cand)))
        locked[p] = rng.randint(lo, hi)
    return locked


def _scramble(size: int, colors: int, moves: int, power: FrozenSet[Position],
              rng: random.Random) -> Tuple[Grid, Grid, List[Move]]:
    solved = uniform_grid(size, 0)
    current = clone_grid(solved)
    history: List[Move] = []
    for _ in range(moves):
        r = rng.randrange(size)
        c = rng.randrange(size)
        is_power = (r, c) in power
        # generation never sees locks
        current = apply_move(current, (r, c), colors, is_power, None, INVERSE)
        history.append(Move(r, c, is_power))
    return current, solved, history


def _verify(grid: Grid, path: Sequence[Move], colors: int, power: FrozenSet[Position],
            locked: Mapping[Position, int], max_states: Optional[int]) -> Optional[List[Move]]:
    """Shortest path for the attempt under play rules, or None to regenerate.

    The scramble path must replay to a win, and a solver run must finish so the
    returned path is a confirmed shortest one (the solver's when it is shorter).
    """
    final, _, _ = replay(grid, path, colors, locked)
    if not is_winning_state(final):
        return None
    res = solve(grid, power, locked, colors, max_states=max_states)
    if res["termination"] != SOLVED:
        logger.debug("verification solver run ended %s (%s)", res["termination"], res["reason"])
        return None
    if res["g"] < len(path):
        return res["path"]
    return list(path)


def generate_puzzle(size: int, colors: int, moves: int,
                    rng: Optional[random.Random] = None,
                    power_tiles: int = 0,
                    locked_tiles: int = 0,
                    lock_moves: Tuple[int, int] = DEFAULT_LOCK_MOVES,
                    max_retries: int = DEFAULT_MAX_RETRIES,
                    max_states: Optional[int] = VERIFY_MAX_STATES,
                    params: Optional[LevelParams] = None) -> GenerationResult:
    """Scramble an all-zero size×size board with `moves` inverse clicks."""
    if size < 1 or colors < 2 or moves < 0:
        raise ValueError(f"bad generation parameters size={size} colors={colors} moves={moves}")
    if rng is None:
        rng = random.Random()
    special = power_tiles > 0 or locked_tiles > 0
    attempts = 0
    while True:
        attempts += 1
        power = _place_power(size, power_tiles, rng) if power_tiles > 0 else frozenset()
        grid, solved, history = _scramble(size, colors, moves, power, rng)
        optimal_path = list(reversed(history))
        locked: Dict[Position, int] = {}
        if locked_tiles > 0:
            locked = _place_locks(size, locked_tiles, optimal_path, power, lock_moves, rng)
        if not special:
            break
        verified = _verify(grid, optimal_path, colors, power, locked, max_states)
        if verified is not None:
            if len(verified) < len(optimal_path):
                logger.debug("solver shortened the scramble path from %d to %d moves",
                             len(optimal_path), len(verified))
            optimal_path = verified
            break
        logger.warning("Generated puzzle failed verification (attempt %d/%d, %dx%d, %d colors)",
                       attempts, max_retries, size, size, colors)
        if attempts >= max_retries:
            raise GenerationExhausted(
                f"no verifiable puzzle after {attempts} attempts "
                f"(size={size}, colors={colors}, moves={moves}, "
                f"power={power_tiles}, locked={locked_tiles})", attempts)
    return GenerationResult(
        grid=grid, solved=solved, power=power, locked=locked,
        optimal_path=optimal_path, reverse_history=history,
        colors=colors, params=params, attempts=attempts,
    )


def generate(level: int,
             rng: Optional[random.Random] = None,
             seed: Optional[int] = None,
             **options) -> GenerationResult:
    """Generate the puzzle for `level`; pass `rng` or `seed` for reproducible output."""
    p = params_for_level(level)
    if rng is None:
        rng = random.Random(seed)
    res = generate_puzzle(p.grid_size, p.colors, p.target_moves, rng, params=p, **options)
    logger.info(
        "Generated level %d (%s): %dx%d, %d colors, %d moves, path=%d, power=%d, locked=%d, attempts=%d",
        level, p.tier, p.grid_size, p.grid_size, p.colors, p.target_moves,
        len(res.optimal_path), len(res.power), len(res.locked), res.attempts,
    )
    return res
