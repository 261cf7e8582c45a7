#!/usr/bin/env python3
"""
Experiment driver: run geometric PSO over several seeds and 3PBMCX weight
triples, evaluate each selected subset on a stratified holdout split.
Usage example:
  python3 -m gpsofs.experiments.experiment_driver \
    --data data/colon_processed.csv \
    --out experiments/experiments_results.csv \
    --runs 5 \
    --weights 0.33,0.33,0.34 0.5,0.25,0.25 \
    --pop_size 20 \
    --max_iter 20
"""
import argparse
import os
import time

import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.metrics import accuracy_score, f1_score, precision_score, recall_score
from sklearn.model_selection import train_test_split

from gpsofs.logger import setup_logger
from gpsofs.pso.bitvector import BitVector
from gpsofs.pso.config import PSOConfig
from gpsofs.pso.evaluators import LABEL_COLUMN, CrossValidatedSubsetEvaluator, DatasetContext
from gpsofs.pso.geometric_pso import GeometricPSO

METHOD = 'Geometric-PSO'


def parse_weights(text):
    parts = [float(v) for v in text.split(',')]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected inertia,social,individual got '{text}'")
    return tuple(parts)


def evaluate_on_holdout(X_train, y_train, X_test, y_test, selected_mask):
    if selected_mask.sum() == 0:
        return {'test_acc': 0.0, 'test_precision': 0.0, 'test_recall': 0.0, 'test_f1': 0.0}
    clf = RandomForestClassifier(n_estimators=100, random_state=0, n_jobs=1)
    clf.fit(X_train[:, selected_mask], y_train)
    preds = clf.predict(X_test[:, selected_mask])
    average = 'binary' if len(set(y_train)) <= 2 else 'macro'
    return {
        'test_acc': float(accuracy_score(y_test, preds)),
        'test_precision': float(precision_score(y_test, preds, average=average, zero_division=0)),
        'test_recall': float(recall_score(y_test, preds, average=average, zero_division=0)),
        'test_f1': float(f1_score(y_test, preds, average=average, zero_division=0))
    }


def run_once(df, feature_names, config, alpha, test_size, cv=3):
    """One seed: split, search on the training part, score on the holdout."""
    train_df, test_df = train_test_split(df, test_size=test_size, random_state=config.seed,
                                         stratify=df[LABEL_COLUMN])
    train_df = train_df.reset_index(drop=True)
    evaluator = CrossValidatedSubsetEvaluator(train_df, alpha=alpha, cv=cv)
    dataset = DatasetContext.from_frame(train_df)
    result = GeometricPSO(config).search(evaluator, dataset)
    mask = evaluator.feature_mask(BitVector(dataset.num_attributes, result.selected))
    metrics = evaluate_on_holdout(train_df[feature_names].to_numpy(), train_df[LABEL_COLUMN].to_numpy(),
                                  test_df[feature_names].to_numpy(), test_df[LABEL_COLUMN].to_numpy(), mask)
    selected = [f for f, m in zip(feature_names, mask) if m]
    return result, selected, metrics


def main(args):
    setup_logger(args.log_level)
    os.makedirs(os.path.dirname(args.out) or '.', exist_ok=True)
    os.makedirs(args.selected_dir, exist_ok=True)
    df = pd.read_csv(args.data)
    if LABEL_COLUMN not in df.columns:
        raise RuntimeError(f"Processed CSV must have '{LABEL_COLUMN}' column")
    feature_names = [c for c in df.columns if c != LABEL_COLUMN]

    rows = []
    for inertia, social, individual in args.weights:
        for run_i in range(args.runs):
            seed = args.seed_base + run_i
            config = PSOConfig(population_size=args.pop_size, iterations=args.max_iter,
                               mutation_probability=args.mutation, inertia_weight=inertia,
                               social_weight=social, individual_weight=individual, seed=seed)
            t0 = time.time()
            result, selected, metrics = run_once(df, feature_names, config, args.alpha, args.test_size)
            runtime = time.time() - t0
            tag = f"w{inertia:.2f}_{social:.2f}_{individual:.2f}"
            sel_fname = os.path.join(args.selected_dir, f"selected_seed{seed}_{tag}.txt")
            with open(sel_fname, "w") as fh:
                fh.write("\n".join(selected))
            row = {
                'method': METHOD,
                'seed': seed,
                'alpha': args.alpha,
                'inertia_weight': inertia,
                'social_weight': social,
                'individual_weight': individual,
                'pop_size': args.pop_size,
                'max_iter': args.max_iter,
                'generations_run': result.generations_run,
                'converged': result.converged,
                'best_score_cv': float(result.best_objective),
                'selected_count': len(selected),
                'runtime_sec': float(runtime),
                'cache_hits': result.cache_hits,
                'cache_misses': result.cache_misses,
                **metrics,
                'selected_file': sel_fname
            }
            rows.append(row)
            # append to CSV incrementally
            df_row = pd.DataFrame([row])
            if not os.path.exists(args.out):
                df_row.to_csv(args.out, index=False)
            else:
                df_row.to_csv(args.out, mode='a', header=False, index=False)
            if args.history_dir:
                os.makedirs(args.history_dir, exist_ok=True)
                pd.DataFrame(result.history).to_csv(
                    os.path.join(args.history_dir, f"history_seed{seed}_{tag}.csv"), index=False)
            print(f"Done seed={seed} weights={tag} best_cv={result.best_objective:.4f} "
                  f"sel={len(selected)} test_acc={metrics['test_acc']:.4f} time={runtime:.1f}s")
    print("All runs complete. Results written to", args.out)
    return rows


def build_parser():
    p = argparse.ArgumentParser()
    p.add_argument("--data", required=True)
    p.add_argument("--out", required=True)
    p.add_argument("--selected_dir", default="experiments")
    p.add_argument("--history_dir", default=None)
    p.add_argument("--runs", type=int, default=5)
    p.add_argument("--weights", type=parse_weights, nargs='+', default=[(0.33, 0.33, 0.34)])
    p.add_argument("--alpha", type=float, default=0.9)
    p.add_argument("--mutation", type=float, default=0.01)
    p.add_argument("--pop_size", type=int, default=20)
    p.add_argument("--max_iter", type=int, default=20)
    p.add_argument("--test_size", type=float, default=0.3)
    p.add_argument("--seed_base", type=int, default=1)
    p.add_argument("--log_level", default="WARNING")
    return p


if __name__ == "__main__":
    main(build_parser().parse_args())
