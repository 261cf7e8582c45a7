#!/usr/bin/env python3
"""
Create final comparison table with mean ± std for each 3PBMCX weight triple.
Usage:
  python3 -m gpsofs.experiments.make_final_table experiments/experiments_results.csv [more.csv ...]
Outputs: experiments/final_results_table.csv
"""
import sys

import pandas as pd

GROUP = ["method", "inertia_weight", "social_weight", "individual_weight"]


def summarize(df):
    return (
        df.groupby(GROUP)
        .agg(
            runs=("seed", "count"),
            mean_acc=("test_acc", "mean"),
            std_acc=("test_acc", "std"),
            mean_feats=("selected_count", "mean"),
            std_feats=("selected_count", "std"),
            mean_generations=("generations_run", "mean"),
            mean_time=("runtime_sec", "mean")
        )
        .reset_index()
    )


def main(paths, out="experiments/final_results_table.csv"):
    df = pd.concat([pd.read_csv(p) for p in paths], ignore_index=True)
    summary = summarize(df)
    summary.to_csv(out, index=False)
    print(summary)
    print(f"\nSaved {out}")
    return summary


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python3 -m gpsofs.experiments.make_final_table results.csv [more.csv ...]")
        sys.exit(1)
    main(sys.argv[1:])
