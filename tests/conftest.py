from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def toy_frame() -> pd.DataFrame:
    """40 samples: f0 separates the classes, f1..f3 are noise."""
    rng = np.random.default_rng(0)
    y = np.array([0, 1] * 20)
    return pd.DataFrame({
        "f0": y * 10.0 + rng.normal(0.0, 0.1, size=40),
        "f1": rng.normal(size=40),
        "f2": rng.normal(size=40),
        "f3": rng.normal(size=40),
        "__label__": y,
    })


@pytest.fixture
def toy_csv(tmp_path: Path, toy_frame: pd.DataFrame) -> Path:
    path = tmp_path / "toy_processed.csv"
    toy_frame.to_csv(path, index=False)
    return path
