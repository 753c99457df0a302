#!/usr/bin/env python3
import sys, os, argparse
from pathlib import Path

import numpy as np
import matplotlib
# Default to a non-interactive backend; we'll only show() if --show
if "MPLBACKEND" not in os.environ:
    matplotlib.use("Agg")
import matplotlib.pyplot as plt

from colorme.experiments.analyze import load_many

METRICS = ["expanded", "time_sec", "g"]


def agg_mean(df, metric):
    """{algorithm: (levels, means, stds)} over rows where the metric is present."""
    series = {}
    sub = df.dropna(subset=[metric])
    for algo, grp in sub.groupby("algorithm"):
        by_level = grp.groupby("level")[metric]
        xs = np.array(sorted(by_level.groups.keys()))
        ys = by_level.mean().reindex(xs).to_numpy()
        es = by_level.std(ddof=0).reindex(xs).fillna(0.0).to_numpy()
        series[algo] = (xs, ys, es)
    return series


def plot_metric(ax, df, metric):
    for algo, (xs, ys, es) in sorted(agg_mean(df, metric).items()):
        # nudge A* so error bars don't overlap BFS
        offset = 0.12 if algo == "A*" else 0.0
        ax.errorbar(xs + offset, ys, yerr=es, marker="o", capsize=3, label=algo)
    if metric == "g" and "optimal_path_len" in df.columns:
        by_level = df.groupby("level")["optimal_path_len"].mean()
        ax.plot(by_level.index, by_level.values, linestyle="--", color="gray", label="constructed path")
    ax.set_xlabel("Level")
    ax.set_ylabel(metric)
    ax.set_title(f"{metric} vs level (mean ± std)")
    ax.grid(True)
    ax.legend()


def save_fig(fig, outdir: Path, name: str) -> Path:
    outdir.mkdir(parents=True, exist_ok=True)
    path = outdir / f"{name}.png"
    fig.savefig(path, dpi=200, bbox_inches="tight")
    print(f"Saved: {path}")
    return path


def main(argv=None):
    ap = argparse.ArgumentParser(description="Plot runner CSVs and save PNGs.")
    ap.add_argument("csv", nargs="+", help="One or more CSV result files")
    ap.add_argument("--save", default="results/plots", help="Directory to save plots")
    ap.add_argument("--show", action="store_true", help="Also open interactive windows (if GUI available)")
    args = ap.parse_args(argv)

    df = load_many(args.csv)
    if df.empty:
        print("No rows to plot. Are your CSVs empty?")
        sys.exit(0)

    outdir = Path(args.save)
    base = "combo" if len(args.csv) > 1 else Path(args.csv[0]).stem

    fig, axes = plt.subplots(1, len(METRICS), figsize=(15, 5))
    for ax, metric in zip(axes, METRICS):
        plot_metric(ax, df, metric)
    plt.tight_layout()
    save_fig(fig, outdir, f"{base}_combined")
    plt.close(fig)

    for metric in METRICS:
        fig, ax = plt.subplots(figsize=(8, 6))
        plot_metric(ax, df, metric)
        plt.tight_layout()
        save_fig(fig, outdir, f"{base}_{metric}")
        plt.close(fig)

    if args.show:
        plt.show()


if __name__ == "__main__":
    main()
