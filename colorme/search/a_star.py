from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional, Set, Tuple
import heapq
import itertools
import math
from time import perf_counter

from colorme.search.bfs import (
    SOLVED, EXHAUSTED, UNSOLVABLE,
    REASON_MAX_STATES, REASON_TIMEOUT, REASON_CANCELLED,
    make_result,
)

State = Hashable


@dataclass
class PQItem:
    f: int
    h: int
    g: int
    state: State
    parent: Optional["PQItem"] = None
    action: Any = None


def reconstruct_path(node: PQItem) -> List[Any]:
    path: List[Any] = []
    while node.parent is not None:
        path.append(node.action)
        node = node.parent
    path.reverse()
    return path


def a_star(
    start: State,
    is_goal: Callable[[State], bool],
    hfun: Callable[[State], int],
    neighbors_fn: Callable[[State], List[Tuple[State, Any]]],
    tie_break: str = "h",
    max_states: Optional[int] = None,
    timeout_sec: float | None = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Dict[str, Any]:
    """
    A* over unit-cost moves. With an admissible hfun the returned path is shortest.
    neighbors_fn: callable(state) -> [(next_state, move)].
    """
    t0 = perf_counter()
    counter = itertools.count()

    def priority_tuple(f: int, g: int, h: int, ctr: int) -> Tuple[int, int, int]:
        if tie_break == "h":   return (f, h, ctr)
        if tie_break == "g":   return (f, -g, ctr)
        if tie_break == "fifo":return (f, 0,  ctr)
        if tie_break == "lifo":return (f, 0, -ctr)
        return (f, h, ctr)

    h0 = hfun(start)
    open_heap: List[Tuple[Tuple[int, int, int], int, PQItem]] = []
    heapq.heappush(open_heap, (priority_tuple(h0, 0, h0, next(counter)), next(counter),
                               PQItem(f=h0, h=h0, g=0, state=start)))
    best_g: Dict[State, int] = {start: 0}
    closed: Set[State] = set()

    expanded = generated = 0
    peak_open = 1

    def finish(termination, path=None, reason=None):
        return make_result("A*", termination, path, expanded=expanded, generated=generated,
                           peak_open=peak_open, time=perf_counter() - t0, reason=reason)

    while open_heap:
        if should_cancel is not None and should_cancel():
            return finish(EXHAUSTED, reason=REASON_CANCELLED)
        if timeout_sec is not None and (perf_counter() - t0) > timeout_sec:
            return finish(EXHAUSTED, reason=REASON_TIMEOUT)
        if max_states is not None and expanded >= max_states:
            return finish(EXHAUSTED, reason=REASON_MAX_STATES)

        peak_open = max(peak_open, len(open_heap))
        _, _, node = heapq.heappop(open_heap)
        if node.state in closed:
            continue
        closed.add(node.state)
        expanded += 1

        if is_goal(node.state):
            return finish(SOLVED, reconstruct_path(node))

        for s2, action in neighbors_fn(node.state):
            generated += 1
            g2 = node.g + 1
            if g2 < best_g.get(s2, math.inf):
                best_g[s2] = g2
                h2 = hfun(s2)
                f2 = g2 + h2
                child = PQItem(f=f2, h=h2, g=g2, state=s2, parent=node, action=action)
                heapq.heappush(open_heap, (priority_tuple(f2, g2, h2, next(counter)), next(counter), child))

    return finish(UNSOLVABLE)
