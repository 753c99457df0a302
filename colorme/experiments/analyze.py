#!/usr/bin/env python3
import argparse, os
from pathlib import Path

import numpy as np
import pandas as pd

NUMERIC = ("level", "seed", "grid_size", "colors", "scramble_moves", "optimal_path_len",
           "g", "expanded", "generated", "peak_open", "time_sec", "roundtrip_ok")


def load_many(paths) -> pd.DataFrame:
    dfs = []
    for fn in paths:
        try:
            df = pd.read_csv(fn)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            print(f"skip {fn}: {e}")
            continue
        df["__src__"] = os.path.basename(str(fn))
        dfs.append(df)
    if not dfs:
        return pd.DataFrame()
    df = pd.concat(dfs, ignore_index=True, sort=False)
    for c in NUMERIC:
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce")
    if "termination" in df.columns:
        df["termination"] = df["termination"].fillna("solved")
    return df


def sem(x):
    x = np.asarray(x, float)
    n = np.sum(~np.isnan(x))
    return 0.0 if n <= 1 else np.nanstd(x, ddof=1) / np.sqrt(n)


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Per (algorithm, level): solve rate, mean/sem of cost metrics, path gap."""
    if df.empty:
        return df
    df = df.copy()
    df["solved"] = (df["termination"] == "solved").astype(int)
    # how many moves the constructed path wastes over the shortest one
    df["path_gap"] = np.where(df["solved"] == 1, df["optimal_path_len"] - df["g"], np.nan)
    rows = []
    for (algo, level), grp in df.groupby(["algorithm", "level"], sort=True):
        ok = grp[grp["solved"] == 1]
        rows.append({
            "algorithm": algo,
            "level": int(level),
            "n": len(grp),
            "solved_rate": grp["solved"].mean(),
            "exhausted": int((grp["termination"] == "exhausted").sum()),
            "unsolvable": int((grp["termination"] == "unsolvable").sum()),
            "expanded_mean": grp["expanded"].mean(),
            "expanded_sem": sem(grp["expanded"]),
            "time_mean": grp["time_sec"].mean(),
            "time_p90": float(np.percentile(grp["time_sec"], 90)),
            "g_mean": ok["g"].mean() if len(ok) else np.nan,
            "optimal_path_mean": grp["optimal_path_len"].mean(),
            "path_gap_mean": ok["path_gap"].mean() if len(ok) else np.nan,
            "roundtrip_ok": bool(grp["roundtrip_ok"].all()),
        })
    return pd.DataFrame(rows)


def print_summary(summary: pd.DataFrame):
    print("=" * 96)
    print(f"{'algo':<6} {'level':>5} {'n':>3} {'solved':>7} {'expanded':>12} {'time':>10} "
          f"{'g':>6} {'path':>6} {'gap':>6} {'roundtrip':>9}")
    print("-" * 96)
    for _, r in summary.iterrows():
        print(f"{r['algorithm']:<6} {r['level']:>5} {r['n']:>3} {r['solved_rate']:>7.2f} "
              f"{r['expanded_mean']:>12.1f} {r['time_mean']:>10.4f} "
              f"{r['g_mean']:>6.2f} {r['optimal_path_mean']:>6.2f} {r['path_gap_mean']:>6.2f} "
              f"{str(r['roundtrip_ok']):>9}")


def main(argv=None):
    ap = argparse.ArgumentParser(description="Summarize runner CSVs by algorithm and level.")
    ap.add_argument("csv", nargs="+", help="CSV files produced by colorme.experiments.runner")
    ap.add_argument("--out", type=Path, default=Path("results/summary.csv"))
    args = ap.parse_args(argv)

    df = load_many(args.csv)
    if df.empty:
        print("No rows to analyze. Are your CSVs empty?")
        return
    summary = summarize(df)
    print_summary(summary)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(args.out, index=False)
    print(f"Saved: {args.out}")


if __name__ == "__main__":
    main()
