#!/usr/bin/env python3
"""
No-feature-selection baseline and paired Wilcoxon comparison against the
geometric PSO runs.
Two modes:
 1) --mode eval_no_fs : holdout accuracy with all features for the given seeds
 2) --mode wilcoxon   : best weight triple (highest mean test_acc) per seed vs no-FS per seed
Usage:
 python3 -m gpsofs.experiments.eval_no_fs_and_wilcoxon --mode eval_no_fs --data data/colon_processed.csv
 python3 -m gpsofs.experiments.eval_no_fs_and_wilcoxon --mode wilcoxon --psocsv experiments/experiments_results.csv
"""
import argparse

import numpy as np
import pandas as pd
from scipy.stats import wilcoxon
from sklearn.ensemble import RandomForestClassifier
from sklearn.metrics import accuracy_score
from sklearn.model_selection import train_test_split

from gpsofs.pso.evaluators import LABEL_COLUMN

WEIGHT_COLUMNS = ['inertia_weight', 'social_weight', 'individual_weight']


def eval_no_fs(data_path, seeds, out_path='experiments/no_fs_accs.csv', test_size=0.3):
    df = pd.read_csv(data_path)
    X = df[[c for c in df.columns if c != LABEL_COLUMN]].to_numpy()
    y = df[LABEL_COLUMN].to_numpy()
    accs = []
    for s in seeds:
        Xtr, Xte, ytr, yte = train_test_split(X, y, test_size=test_size, random_state=s, stratify=y)
        clf = RandomForestClassifier(n_estimators=100, random_state=0, n_jobs=1)
        clf.fit(Xtr, ytr)
        acc = accuracy_score(yte, clf.predict(Xte))
        accs.append(float(acc))
        print(f"seed={s} no-FS acc={acc:.4f}")
    print("no-FS acc mean/std:", np.mean(accs), np.std(accs))
    out = pd.DataFrame({'seed': list(seeds), 'no_fs_acc': accs})
    out.to_csv(out_path, index=False)
    return out


def best_weights(df):
    """Weight triple with the highest mean test accuracy."""
    means = df.groupby(WEIGHT_COLUMNS)['test_acc'].mean()
    return tuple(means.idxmax())


def wilcoxon_test(psocsv, nofs_csv='experiments/no_fs_accs.csv'):
    df = pd.read_csv(psocsv)
    weights = best_weights(df)
    chosen = df
    for col, w in zip(WEIGHT_COLUMNS, weights):
        chosen = chosen[np.isclose(chosen[col], w)]
    chosen = chosen.sort_values('seed')
    nofs = pd.read_csv(nofs_csv).sort_values('seed')
    common = pd.merge(chosen, nofs, on='seed')
    if len(common) == 0:
        raise RuntimeError("No common seeds between PSO results and no-FS baseline")
    pso_accs = common['test_acc'].values
    nofs_accs = common['no_fs_acc'].values
    print("best weights (inertia, social, individual):", weights)
    print("Geometric-PSO accs:", pso_accs)
    print("No-FS accs        :", nofs_accs)
    # paired signed-rank test; all-zero differences make it undefined
    if np.allclose(pso_accs, nofs_accs):
        print("Identical accuracies, Wilcoxon test skipped")
        return weights, None, None
    stat, p = wilcoxon(pso_accs, nofs_accs)
    print("Wilcoxon stat, p-value:", stat, p)
    return weights, float(stat), float(p)


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--mode", choices=['eval_no_fs', 'wilcoxon'], required=True)
    p.add_argument("--data", default='data/colon_processed.csv')
    p.add_argument("--psocsv", default='experiments/experiments_results.csv')
    p.add_argument("--nofs", default='experiments/no_fs_accs.csv')
    p.add_argument("--seeds", type=int, nargs='+', default=[1, 2, 3, 4, 5])
    args = p.parse_args()
    if args.mode == 'eval_no_fs':
        eval_no_fs(args.data, args.seeds, args.nofs)
    else:
        wilcoxon_test(args.psocsv, args.nofs)
