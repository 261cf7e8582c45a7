#!/usr/bin/env python3
"""
Plots for geometric PSO experiments.
 - acc_vs_features: test accuracy vs number of selected features, one series per weight triple
 - convergence: global best merit and feature count per generation (a history CSV)
Usage:
  python3 -m gpsofs.experiments.plot_results acc_vs_features experiments/experiments_results.csv experiments/fig_acc_vs_features.png
  python3 -m gpsofs.experiments.plot_results convergence experiments/history/history_seed1_w0.33_0.33_0.34.csv experiments/fig_convergence.png
"""
import sys

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402


def plot_acc_vs_features(results_csv, out_png):
    df = pd.read_csv(results_csv)
    plt.figure(figsize=(6, 4))
    for (wi, ws, wp), d in df.groupby(["inertia_weight", "social_weight", "individual_weight"]):
        plt.scatter(d["selected_count"], d["test_acc"], label=f"w=({wi:.2f},{ws:.2f},{wp:.2f})", alpha=0.7)
    plt.xlabel("Number of Selected Features")
    plt.ylabel("Test Accuracy")
    plt.title("Accuracy vs Feature Count")
    plt.legend(fontsize=8)
    plt.tight_layout()
    plt.savefig(out_png, dpi=150)
    plt.close()
    print(f"Saved {out_png}")


def plot_convergence(history_csv, out_png):
    df = pd.read_csv(history_csv)
    fig, ax1 = plt.subplots(figsize=(6, 4))
    ax1.plot(df["generation"], df["best_objective"], marker="o", label="global best merit")
    ax1.plot(df["generation"], df["avg_fitness"], linestyle="--", label="population mean merit")
    ax1.set_xlabel("Generation")
    ax1.set_ylabel("Merit")
    ax2 = ax1.twinx()
    ax2.step(df["generation"], df["best_feature_count"], where="post", color="gray", label="best #features")
    ax2.set_ylabel("Selected features")
    lines = ax1.get_legend_handles_labels()
    lines2 = ax2.get_legend_handles_labels()
    ax1.legend(lines[0] + lines2[0], lines[1] + lines2[1], fontsize=8)
    ax1.set_title("Geometric PSO convergence")
    fig.tight_layout()
    fig.savefig(out_png, dpi=150)
    plt.close(fig)
    print(f"Saved {out_png}")


if __name__ == "__main__":
    plots = {"acc_vs_features": plot_acc_vs_features, "convergence": plot_convergence}
    if len(sys.argv) != 4 or sys.argv[1] not in plots:
        print("Usage: python3 -m gpsofs.experiments.plot_results {acc_vs_features|convergence} input.csv output.png")
        sys.exit(1)
    plots[sys.argv[1]](sys.argv[2], sys.argv[3])
