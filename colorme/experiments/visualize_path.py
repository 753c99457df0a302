#!/usr/bin/env python3
import argparse, os
import random
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import matplotlib
if "MPLBACKEND" not in os.environ:
    matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from colorme.domains.generator import generate
from colorme.domains.grid import Grid, Move, Position, apply_move, decrement_locks, FORWARD
from colorme.domains.levels import COLOR_PALETTE
from colorme.search.solver import solve


def draw_board(grid: Grid, out_path: Path, power: Iterable[Position] = (),
               locked: Optional[Dict[Position, int]] = None, click: Optional[Move] = None):
    n = len(grid)
    power = set(power)
    locked = locked or {}
    plt.figure(figsize=(3, 3))
    ax = plt.gca()
    ax.set_xlim(0, n); ax.set_ylim(0, n)
    ax.set_xticks([]); ax.set_yticks([]); ax.invert_yaxis()
    for r in range(n):
        for c in range(n):
            ax.add_patch(Rectangle((c, r), 1, 1, facecolor=COLOR_PALETTE[grid[r][c]],
                                   edgecolor="white", linewidth=2))
            if (r, c) in power:
                ax.text(c + 0.5, r + 0.5, "★", ha="center", va="center", fontsize=14, color="white")
            if locked.get((r, c), 0) > 0:
                ax.text(c + 0.5, r + 0.5, str(locked[(r, c)]), ha="center", va="center",
                        fontsize=14, color="black")
    if click is not None:
        ax.add_patch(Rectangle((click.col, click.row), 1, 1, fill=False,
                               edgecolor="black", linewidth=3))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()


def frames(grid: Grid, path: List[Move], colors: int, locked: Optional[Dict[Position, int]] = None):
    """Yield (grid, locks, next_move) along `path`, ending with the final grid."""
    locks = dict(locked or {})
    for m in path:
        if locks.get(m.position, 0) > 0:
            continue
        yield grid, locks, m
        grid = apply_move(grid, m.position, colors, m.power, locks, FORWARD)
        locks = decrement_locks(locks)
    yield grid, locks, None


def main(argv=None):
    p = argparse.ArgumentParser(description="Generate one puzzle, solve it and save board images along the path.")
    p.add_argument("--level", type=int, default=5)
    p.add_argument("--seed", type=int, default=1)
    p.add_argument("--path", choices=["solver", "constructed"], default="solver",
                   help="Draw the shortest solver path or the generator's reverse path")
    p.add_argument("--algo", choices=["bfs", "astar"], default="bfs")
    p.add_argument("--max_states", type=int, default=200_000)
    p.add_argument("--outdir", default="results/figs/example_path")
    args = p.parse_args(argv)

    puzzle = generate(args.level, rng=random.Random(args.seed))
    if args.path == "solver":
        res = solve(puzzle.grid, puzzle.power, puzzle.locked, puzzle.colors,
                    max_states=args.max_states, algorithm=args.algo)
        if res["termination"] != "solved":
            print(f"No path ({res['termination']}, {res['reason']}). Try a lower level or --path constructed.")
            return
        path = res["path"]
    else:
        path = puzzle.optimal_path

    outdir = Path(args.outdir)
    count = 0
    for i, (grid, locks, move) in enumerate(frames(puzzle.grid, path, puzzle.colors, puzzle.locked)):
        draw_board(grid, outdir / f"step_{i:03d}.png", puzzle.power, locks, move)
        count += 1
    print(f"Saved {count} frames to {outdir}")


if __name__ == "__main__":
    main()
