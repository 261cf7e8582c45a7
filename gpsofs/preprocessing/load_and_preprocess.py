#!/usr/bin/env python3
"""
Load CSV, basic cleaning, z-score normalization, save processed CSV with the
class as the last column ('__label__'), which is where the search expects it.
Usage:
  python3 -m gpsofs.preprocessing.load_and_preprocess data/colon.csv data/colon_processed.csv
"""
import logging
import sys

import pandas as pd
from sklearn.preprocessing import StandardScaler

from gpsofs.pso.evaluators import LABEL_COLUMN, DatasetContext

logger = logging.getLogger(__name__)


def preprocess_frame(df, label=None):
    """Return a standardized copy of `df` with the label moved to '__label__' (last)."""
    if label is None:
        # If label column named 'label' or 'target', use it; else assume last column is label
        for candidate in ('label', 'target', LABEL_COLUMN):
            if candidate in df.columns:
                label = candidate
                break
        else:
            label = df.columns[-1]
    y = df[label].values
    X = df.drop(columns=[label])
    non_numeric = [c for c in X.columns if not pd.api.types.is_numeric_dtype(X[c])]
    if non_numeric:
        raise ValueError(f"Non-numeric feature columns: {non_numeric[:10]}")
    # Fill NA if any
    X = X.fillna(X.mean())
    Xs = StandardScaler().fit_transform(X.values)
    out_df = pd.DataFrame(Xs, columns=X.columns)
    out_df[LABEL_COLUMN] = y
    return out_df


def load_processed(path):
    """Read a processed CSV; returns (frame, feature_names, DatasetContext)."""
    df = pd.read_csv(path)
    if LABEL_COLUMN not in df.columns:
        raise RuntimeError(f"Processed CSV must have '{LABEL_COLUMN}' column")
    feature_names = [c for c in df.columns if c != LABEL_COLUMN]
    dataset = DatasetContext.from_frame(df, LABEL_COLUMN)
    logger.info("Loaded %s: %d samples, %d features", path, len(df), len(feature_names))
    return df, feature_names, dataset


def main(in_path, out_path, label=None):
    df = pd.read_csv(in_path, index_col=None)
    print(f"Loaded {in_path} shape={df.shape}")
    out_df = preprocess_frame(df, label)
    out_df.to_csv(out_path, index=False)
    print(f"Saved processed data to {out_path} shape={out_df.shape}")


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: python3 -m gpsofs.preprocessing.load_and_preprocess input.csv output_processed.csv [label_column]")
        sys.exit(1)
    main(*sys.argv[1:])
