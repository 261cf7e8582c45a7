#!/usr/bin/env python3
"""
Dataset context and subset evaluators consumed by the search.

Any object with `evaluate(subset: BitVector) -> float` (higher is better) is a
subset evaluator. An evaluator may set `supervised = False`, in which case the
search ignores the dataset's class attribute.

CrossValidatedSubsetEvaluator scores a subset as an accuracy/size trade-off:
    alpha * CV accuracy - (1 - alpha) * (#features / d)
with a RandomForest and 3-fold cross-validation by default.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, runtime_checkable

import numpy as np
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import cross_val_score

from gpsofs.pso.bitvector import BitVector

LABEL_COLUMN = "__label__"


@dataclass(frozen=True)
class DatasetContext:
    """Read-only dataset facts the search needs: width and class position."""
    num_attributes: int
    has_class: bool = False
    class_index: int = -1
    attribute_names: List[str] = field(default_factory=list)

    @classmethod
    def from_frame(cls, df, label_column=LABEL_COLUMN):
        names = [str(c) for c in df.columns]
        if label_column is not None and label_column in df.columns:
            return cls(len(names), True, list(df.columns).index(label_column), names)
        return cls(len(names), False, -1, names)

    def attribute_name(self, index):
        if index < len(self.attribute_names):
            return self.attribute_names[index]
        return str(index + 1)


@runtime_checkable
class SubsetEvaluator(Protocol):
    def evaluate(self, subset: BitVector) -> float:
        ...


class FunctionSubsetEvaluator:
    """Adapts a plain function of a BitVector into a subset evaluator."""

    def __init__(self, func: Callable[[BitVector], float], supervised: bool = True):
        self.func = func
        self.supervised = supervised
        self.calls = 0

    def evaluate(self, subset: BitVector) -> float:
        self.calls += 1
        return float(self.func(subset))


class CrossValidatedSubsetEvaluator:
    """
    Wrapper evaluator over a processed DataFrame (features + label column).
    Bit i of a subset refers to column i of the frame, so the bit of the label
    column is the class bit and is ignored here.
    """
    supervised = True

    def __init__(self, df, label_column=LABEL_COLUMN, alpha=0.9, cv=3,
                 n_estimators=50, random_state=0, estimator=None):
        if label_column not in df.columns:
            raise RuntimeError(f"Processed frame must have '{label_column}' column")
        columns = list(df.columns)
        self.feature_bits = np.array([i for i, c in enumerate(columns) if c != label_column], dtype=int)
        self.X = df.drop(columns=[label_column]).to_numpy()
        self.y = df[label_column].to_numpy()
        self.d = self.X.shape[1]
        self.alpha = alpha
        self.cv = cv
        self.n_estimators = n_estimators
        self.random_state = random_state
        self.estimator = estimator

    def _make_estimator(self):
        if self.estimator is not None:
            from sklearn.base import clone
            return clone(self.estimator)
        return RandomForestClassifier(n_estimators=self.n_estimators,
                                      random_state=self.random_state, n_jobs=1)

    def feature_mask(self, subset: BitVector) -> np.ndarray:
        return subset.to_mask()[self.feature_bits]

    def evaluate(self, subset: BitVector) -> float:
        mask = self.feature_mask(subset)
        if mask.sum() == 0:
            return -1.0
        Xs = self.X[:, mask]
        acc = cross_val_score(self._make_estimator(), Xs, self.y, cv=self.cv,
                              scoring='accuracy', n_jobs=1).mean()
        penalty = mask.sum() / float(self.d)
        return float(self.alpha * acc - (1.0 - self.alpha) * penalty)


def is_subset_evaluator(obj) -> bool:
    return isinstance(obj, SubsetEvaluator)


def class_index_in_effect(evaluator, dataset: DatasetContext) -> Optional[int]:
    """Class index the search must keep unset, or None."""
    if not getattr(evaluator, "supervised", True):
        return None
    if dataset.has_class and 0 <= dataset.class_index < dataset.num_attributes:
        return dataset.class_index
    return None
