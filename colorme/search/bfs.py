from __future__ import annotations
from collections import deque
from time import perf_counter
from typing import Any, Callable, Deque, Dict, Hashable, List, Optional, Tuple

State = Hashable
Action = Any

SOLVED = "solved"
EXHAUSTED = "exhausted"      # budget / deadline / cancellation hit first
UNSOLVABLE = "unsolvable"    # reachable space explored, no goal

REASON_MAX_STATES = "max_states"
REASON_TIMEOUT = "timeout"
REASON_CANCELLED = "cancelled"


def make_result(algorithm: str, termination: str, path: Optional[List[Action]] = None, *,
                expanded: int = 0, generated: int = 0, peak_open: int = 0,
                time: float = 0.0, reason: Optional[str] = None) -> Dict[str, Any]:
    return {
        "path": path if path is not None else [],
        "g": len(path) if path is not None else None,
        "expanded": expanded,
        "generated": generated,
        "peak_open": peak_open,
        "time": time,
        "algorithm": algorithm,
        "termination": termination,
        "reason": reason,
    }


class BreadthFirstSearch:
    """BFS whose frontier and parent links live on the instance.

    `run()` can be called again after an "exhausted" result with a fresh
    budget and picks up at the next dequeue; counters are cumulative. The
    goal test happens at dequeue, so the first goal found is a shortest path.
    Ties follow the order `neighbors_fn` yields moves.
    """
    def __init__(self, start: State,
                 is_goal: Callable[[State], bool],
                 neighbors_fn: Callable[[State], List[Tuple[State, Action]]],
                 algorithm: str = "BFS"):
        self.is_goal = is_goal
        self.neighbors_fn = neighbors_fn
        self.algorithm = algorithm
        self.frontier: Deque[State] = deque([start])
        self.parent: Dict[State, Optional[Tuple[State, Action]]] = {start: None}
        self.expanded = 0
        self.generated = 0
        self.peak_open = 1
        self.elapsed = 0.0
        self.result: Optional[Dict[str, Any]] = None

    @property
    def done(self) -> bool:
        return self.result is not None

    def reconstruct(self, s: State) -> List[Action]:
        path: List[Action] = []
        link = self.parent[s]
        while link is not None:
            prev, action = link
            path.append(action)
            link = self.parent[prev]
        path.reverse()
        return path

    def _finish(self, termination: str, path=None, reason=None) -> Dict[str, Any]:
        return make_result(self.algorithm, termination, path,
                           expanded=self.expanded, generated=self.generated,
                           peak_open=self.peak_open, time=self.elapsed, reason=reason)

    def run(self, max_states: Optional[int] = None,
            timeout_sec: float | None = None,
            should_cancel: Optional[Callable[[], bool]] = None) -> Dict[str, Any]:
        """Advance the search; `max_states` bounds dequeues made by this call."""
        if self.result is not None:
            return self.result
        t0 = perf_counter()
        base = self.elapsed
        budget_used = 0
        q = self.frontier
        while q:
            self.elapsed = base + (perf_counter() - t0)
            if should_cancel is not None and should_cancel():
                return self._finish(EXHAUSTED, reason=REASON_CANCELLED)
            if timeout_sec is not None and (perf_counter() - t0) > timeout_sec:
                return self._finish(EXHAUSTED, reason=REASON_TIMEOUT)
            if max_states is not None and budget_used >= max_states:
                return self._finish(EXHAUSTED, reason=REASON_MAX_STATES)
            self.peak_open = max(self.peak_open, len(q))
            s = q.popleft()
            budget_used += 1
            self.expanded += 1
            if self.is_goal(s):
                self.elapsed = base + (perf_counter() - t0)
                self.result = self._finish(SOLVED, self.reconstruct(s))
                return self.result
            for s2, action in self.neighbors_fn(s):
                self.generated += 1
                if s2 in self.parent:
                    continue
                self.parent[s2] = (s, action)
                q.append(s2)
        self.elapsed = base + (perf_counter() - t0)
        self.result = self._finish(UNSOLVABLE)
        return self.result


def bfs(start: State,
        is_goal: Callable[[State], bool],
        neighbors_fn: Callable[[State], List[Tuple[State, Action]]],
        max_states: Optional[int] = None,
        timeout_sec: float | None = None,
        should_cancel: Optional[Callable[[], bool]] = None) -> Dict[str, Any]:
    return BreadthFirstSearch(start, is_goal, neighbors_fn).run(
        max_states=max_states, timeout_sec=timeout_sec, should_cancel=should_cancel)
