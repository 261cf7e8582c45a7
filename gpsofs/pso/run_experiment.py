#!/usr/bin/env python3
"""
Run a geometric PSO attribute search on a processed CSV and print the report.
Usage:
  python3 -m gpsofs.pso.run_experiment data/colon_processed.csv -N 20 -I 20 -S 1
  gpsofs-search data/colon_processed.csv --start-set 1,3,5-7 --report-frequency 5
"""
import argparse
import sys

from gpsofs.logger import setup_logger
from gpsofs.preprocessing.load_and_preprocess import load_processed
from gpsofs.pso.config import PSOConfig
from gpsofs.pso.errors import PSOSearchError
from gpsofs.pso.evaluators import CrossValidatedSubsetEvaluator
from gpsofs.pso.geometric_pso import GeometricPSO


def build_parser():
    defaults = PSOConfig()
    p = argparse.ArgumentParser(description="Geometric PSO attribute subset search")
    p.add_argument("data", help="processed CSV with a '__label__' column")
    p.add_argument("-N", "--population-size", type=int, default=defaults.population_size,
                   help="number of particles in the swarm (default 20)")
    p.add_argument("-I", "--iterations", type=int, default=defaults.iterations,
                   help="number of iterations to perform (default 20)")
    p.add_argument("-M", "--mutation-probability", type=float, default=defaults.mutation_probability,
                   help="probability of bit-flip mutation (default 0.01)")
    p.add_argument("-A", "--inertia-weight", type=float, default=defaults.inertia_weight,
                   help="inertia weight in 3PBMCX (default 0.33)")
    p.add_argument("-B", "--social-weight", type=float, default=defaults.social_weight,
                   help="social weight in 3PBMCX (default 0.33)")
    p.add_argument("-C", "--individual-weight", type=float, default=defaults.individual_weight,
                   help="individual weight in 3PBMCX (default 0.34); the three weights must sum to 1")
    p.add_argument("-P", "--start-set", default=None,
                   help="starting set of attributes, e.g. 1,3,5-7; becomes one member of the initial population")
    p.add_argument("-R", "--report-frequency", type=int, default=None,
                   help="report every R iterations (default = number of iterations)")
    p.add_argument("-S", "--seed", type=int, default=defaults.seed, help="random seed (default 1)")
    p.add_argument("--alpha", type=float, default=0.9, help="accuracy weight in the subset merit")
    p.add_argument("--cv", type=int, default=3, help="cross-validation folds")
    p.add_argument("--n-jobs", type=int, default=1, help="threads used to evaluate particles")
    p.add_argument("--log-level", default="INFO")
    return p


def config_from_args(args):
    return PSOConfig(
        population_size=args.population_size,
        iterations=args.iterations,
        mutation_probability=args.mutation_probability,
        inertia_weight=args.inertia_weight,
        social_weight=args.social_weight,
        individual_weight=args.individual_weight,
        start_set=args.start_set,
        report_frequency=args.report_frequency,
        seed=args.seed,
        n_jobs=args.n_jobs,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logger(args.log_level)
    try:
        df, feature_names, dataset = load_processed(args.data)
        evaluator = CrossValidatedSubsetEvaluator(df, alpha=args.alpha, cv=args.cv)
        result = GeometricPSO(config_from_args(args)).search(evaluator, dataset)
    except (PSOSearchError, RuntimeError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    selected = result.selected_names(dataset)
    print(result.report)
    print("BEST merit:", f"{result.best_objective:.5f}")
    print("selected features count:", result.best_feature_count)
    print("selected features (first 50):", selected[:50])
    return 0


if __name__ == "__main__":
    sys.exit(main())
