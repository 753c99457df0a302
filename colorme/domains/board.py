from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from colorme.domains.grid import Grid, Move, Position, affected_positions, check_grid, in_bounds

State = Tuple[int, ...]


class ColorBoard:
    """Search view of an N×N Color Me Same board.

    A state is the row-major flattening of the grid followed by the remaining
    lock count of every initially locked position (row-major lock order). Every
    forward move decrements all locks, so two equal grids with different lock
    countdowns are distinct states. With no locks the state is the flat grid.
    """
    def __init__(self, size: int, colors: int,
                 power: Iterable[Position] = (),
                 locked: Optional[Mapping[Position, int]] = None):
        assert size >= 1 and colors >= 2
        self.N = size
        self.colors = colors
        self.cells = size * size
        self.power = frozenset(power)
        # off-board keys are inert for apply_move, so they are dropped here too
        locked = {p: v for p, v in (locked or {}).items() if v > 0 and in_bounds(size, *p)}
        self.lock_positions: Tuple[Position, ...] = tuple(sorted(locked))
        self.initial_locks: Tuple[int, ...] = tuple(locked[p] for p in self.lock_positions)
        self._lock_slot: Dict[int, int] = {
            self.index(*p): k for k, p in enumerate(self.lock_positions)
        }
        # Precomputed affected flat indices per clicked cell
        self._hits: List[Tuple[int, ...]] = []
        for i in range(self.cells):
            r, c = divmod(i, size)
            hits = affected_positions(size, r, c, (r, c) in self.power)
            self._hits.append(tuple(self.index(rr, cc) for rr, cc in hits))
        self.max_hits = max(len(h) for h in self._hits)

    @classmethod
    def from_grid(cls, grid: Grid, colors: int, power: Iterable[Position] = (),
                  locked: Optional[Mapping[Position, int]] = None) -> "ColorBoard":
        return cls(check_grid(grid, colors), colors, power, locked)

    def index(self, row: int, col: int) -> int:
        return row * self.N + col

    # ---------- Encoding ----------
    def encode(self, grid: Grid, locked: Optional[Mapping[Position, int]] = None) -> State:
        """Canonical state key for `grid`; lock counts default to the board's initial ones."""
        flat = tuple(v for row in grid for v in row)
        if locked is None:
            return flat + self.initial_locks
        return flat + tuple(max(0, locked.get(p, 0)) for p in self.lock_positions)

    def decode(self, s: State) -> Tuple[Grid, Dict[Position, int]]:
        n = self.N
        grid = [list(s[r * n:(r + 1) * n]) for r in range(n)]
        locks = {p: v for p, v in zip(self.lock_positions, s[self.cells:]) if v > 0}
        return grid, locks

    # ---------- Core dynamics ----------
    def is_goal(self, s: State) -> bool:
        first = s[0]
        for k in range(1, self.cells):
            if s[k] != first:
                return False
        return True

    def neighbors(self, s: State) -> List[Tuple[State, Move]]:
        """(next_state, move) for every clickable cell, row-major."""
        cells = self.cells
        locks = s[cells:]
        slot = self._lock_slot
        colors = self.colors
        next_locks = tuple(v - 1 if v > 0 else 0 for v in locks)
        out: List[Tuple[State, Move]] = []
        for i in range(cells):
            k = slot.get(i)
            if k is not None and locks[k] > 0:
                continue
            lst = list(s[:cells])
            for j in self._hits[i]:
                kj = slot.get(j)
                if kj is not None and locks[kj] > 0:
                    continue
                lst[j] = (lst[j] + 1) % colors
            r, c = divmod(i, self.N)
            out.append((tuple(lst) + next_locks, Move(r, c, (r, c) in self.power)))
        return out

    # ---------- Heuristics ----------
    def color_deficit(self, s: State) -> int:
        """Admissible lower bound on remaining moves.

        Reaching all-`t` needs at least sum((t - v) mod colors) increments and
        one move delivers at most `max_hits` of them.
        """
        colors = self.colors
        k = self.max_hits
        best = None
        for t in range(colors):
            need = 0
            for v in s[:self.cells]:
                need += (t - v) % colors
            h = -(-need // k)
            if best is None or h < best:
                best = h
        return best or 0
