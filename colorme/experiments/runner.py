from __future__ import annotations
import argparse, csv
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List

from colorme.domains.generator import GenerationResult, generate, replay
from colorme.domains.grid import is_winning_state
from colorme.search.solver import DEFAULT_MAX_STATES, solve

HEADER = [
    "algorithm", "level", "tier", "seed",
    "grid_size", "colors", "scramble_moves", "optimal_path_len",
    "g", "expanded", "generated", "peak_open", "time_sec",
    "termination", "reason", "roundtrip_ok",
]


@dataclass
class Instance:
    seed: int
    level: int
    puzzle: GenerationResult


def _gen(levels: List[int], per_level: int, start_seed: int = 0) -> List[Instance]:
    out: List[Instance] = []
    seed = start_seed
    for lvl in levels:
        for _ in range(per_level):
            out.append(Instance(seed=seed, level=lvl, puzzle=generate(lvl, rng=random.Random(seed))))
            seed += 1
    return out


def roundtrip_ok(p: GenerationResult) -> bool:
    final, _, _ = replay(p.grid, p.optimal_path, p.colors, p.locked)
    return is_winning_state(final)


def make_row(res: dict, inst: Instance) -> list:
    p = inst.puzzle
    return [
        res["algorithm"], inst.level, p.params.tier if p.params else "", inst.seed,
        p.size, p.colors, len(p.reverse_history), len(p.optimal_path),
        "" if res["g"] is None else res["g"],
        res["expanded"], res["generated"], res["peak_open"], f"{res['time']:.6f}",
        res["termination"], res["reason"] or "", int(roundtrip_ok(p)),
    ]


def main(argv=None):
    ap = argparse.ArgumentParser(description="Generate Color Me Same puzzles per level and solve them (BFS / A*)")
    ap.add_argument("--algo", choices=["bfs", "a", "both"], default="both")
    ap.add_argument("--levels", type=int, nargs="+", default=[1, 3, 5, 8, 10, 12, 15])
    ap.add_argument("--per_level", type=int, default=5)
    ap.add_argument("--seed", type=int, default=0, help="First seed; instances use consecutive seeds")
    ap.add_argument("--max_states", type=int, default=DEFAULT_MAX_STATES,
                    help="Per-instance state budget (0 = unlimited)")
    ap.add_argument("--timeout_sec", type=float, default=None, help="Per-instance wall time")
    ap.add_argument("--out", type=Path, default=Path("results/last_run.csv"))
    args = ap.parse_args(argv)

    max_states = args.max_states or None
    insts = _gen(args.levels, args.per_level, args.seed)
    args.out.parent.mkdir(parents=True, exist_ok=True)

    want_bfs = args.algo in ("bfs", "both")
    want_a = args.algo in ("a", "both")

    with args.out.open("w", newline="") as f:
        w = csv.writer(f); w.writerow(HEADER)
        for inst in insts:
            p = inst.puzzle
            if want_bfs:
                r = solve(p.grid, p.power, p.locked, p.colors,
                          max_states=max_states, timeout_sec=args.timeout_sec, algorithm="bfs")
                w.writerow(make_row(r, inst))
            if want_a:
                r = solve(p.grid, p.power, p.locked, p.colors,
                          max_states=max_states, timeout_sec=args.timeout_sec, algorithm="astar")
                w.writerow(make_row(r, inst))

    print(f"Wrote {args.out} ({len(insts)} instances)")


if __name__ == "__main__":
    main()
