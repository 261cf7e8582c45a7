"""
Hyperparameters of the geometric PSO search.

Defaults follow the classic PSOSearch options: 20 particles, 20 iterations,
bit-flip probability 0.01, 3PBMCX weights 0.33 / 0.33 / 0.34, seed 1, and a
report frequency equal to the number of iterations.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence, Union

from gpsofs.pso.errors import InvalidConfiguration

WEIGHT_SUM_TOL = 1e-9


@dataclass(frozen=True)
class PSOConfig:
    population_size: int = 20
    iterations: int = 20
    mutation_probability: float = 0.01
    inertia_weight: float = 0.33
    social_weight: float = 0.33
    individual_weight: float = 0.34
    start_set: Optional[Union[str, Sequence[int]]] = None
    report_frequency: Optional[int] = None
    seed: int = 1
    n_jobs: int = 1

    @property
    def effective_report_frequency(self) -> int:
        return self.iterations if self.report_frequency is None else self.report_frequency

    @property
    def weights(self):
        return (self.inertia_weight, self.social_weight, self.individual_weight)

    def validate(self) -> "PSOConfig":
        if self.population_size < 1:
            raise InvalidConfiguration(
                f"Population size set to: {self.population_size}, cannot be less than 1!")
        total = self.inertia_weight + self.social_weight + self.individual_weight
        if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=WEIGHT_SUM_TOL):
            raise InvalidConfiguration(
                f"Inertia weight: {self.inertia_weight}, social weight: {self.social_weight}, "
                f"individual weight: {self.individual_weight} -> the sum must be equal to 1!")
        if any(w < 0.0 for w in self.weights):
            raise InvalidConfiguration(f"3PBMCX weights must be non-negative, got {self.weights}")
        if not 0.0 <= self.mutation_probability <= 1.0:
            raise InvalidConfiguration(
                f"Mutation probability set to: {self.mutation_probability}, "
                "it must be a real number in the range [0.0, 1.0]!")
        if self.iterations < 1:
            raise InvalidConfiguration(
                f"Iterations set to: {self.iterations}, cannot be less than 1!")
        if self.effective_report_frequency < 1:
            raise InvalidConfiguration(
                f"Report frequency set to: {self.report_frequency}, cannot be less than 1!")
        if self.n_jobs < 1:
            raise InvalidConfiguration(f"n_jobs set to: {self.n_jobs}, cannot be less than 1!")
        return self

    def start_set_spec(self) -> str:
        """The start set as a range string ('' when absent)."""
        if self.start_set is None:
            return ""
        if isinstance(self.start_set, str):
            return self.start_set.strip()
        return ",".join(str(int(i)) for i in self.start_set)

    def resolve_start_set(self, num_attributes: int) -> Optional[List[int]]:
        spec = self.start_set_spec()
        if not spec:
            return None
        return parse_range(spec, num_attributes)

    def to_dict(self):
        d = asdict(self)
        if d["start_set"] is not None and not isinstance(d["start_set"], str):
            d["start_set"] = self.start_set_spec()
        d["report_frequency"] = self.effective_report_frequency
        return d


def _parse_index(token: str, num_attributes: int) -> int:
    token = token.strip().lower()
    if token == "first":
        return 0
    if token == "last":
        return num_attributes - 1
    try:
        value = int(token)
    except ValueError:
        raise InvalidConfiguration(f"Invalid attribute index in start set: '{token}'") from None
    if value < 1 or value > num_attributes:
        raise InvalidConfiguration(
            f"Start set index {value} out of range [1, {num_attributes}]")
    return value - 1


def parse_range(spec: str, num_attributes: int) -> List[int]:
    """
    Parse a 1-based attribute range such as '1,3,5-7' or 'first-3,last'
    into sorted, unique 0-based indices.
    """
    selected = set()
    for part in spec.split(","):
        part = part.strip()
        if not part:
            raise InvalidConfiguration(f"Empty element in start set '{spec}'")
        if "-" in part:
            lo_s, _, hi_s = part.partition("-")
            lo = _parse_index(lo_s, num_attributes)
            hi = _parse_index(hi_s, num_attributes)
            if lo > hi:
                raise InvalidConfiguration(f"Decreasing range '{part}' in start set")
            selected.update(range(lo, hi + 1))
        else:
            selected.add(_parse_index(part, num_attributes))
    return sorted(selected)
