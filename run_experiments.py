#!/usr/bin/env python3
import subprocess, sys
from pathlib import Path

def run(cmd):
    print("Running:", cmd)
    r = subprocess.run(cmd, shell=True)
    if r.returncode != 0:
        sys.exit(r.returncode)

def main():
    Path("results").mkdir(exist_ok=True)
    py = sys.executable
    run(f"{py} -m colorme.experiments.runner --levels 1 2 3 4 5 6 7 8 9 10 --per_level 10 --algo both --out results/easy.csv")
    run(f"{py} -m colorme.experiments.runner --levels 11 12 13 14 15 --per_level 5 --algo a --max_states 500000 --out results/medium.csv")
    run(f"{py} -m colorme.experiments.analyze results/easy.csv results/medium.csv --out results/summary.csv")
    run(f"{py} -m colorme.experiments.plot results/easy.csv results/medium.csv --save results/plots")

if __name__ == "__main__":
    main()
