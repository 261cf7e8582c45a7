from __future__ import annotations

from typing import List

import pytest

from gpsofs.pso.bitvector import BitVector
from gpsofs.pso.config import PSOConfig
from gpsofs.pso.errors import EvaluationFailure, EvaluatorTypeMismatch, InvalidConfiguration
from gpsofs.pso.evaluators import DatasetContext, FunctionSubsetEvaluator
from gpsofs.pso.geometric_pso import GeometricPSO, SearchState, pso_search


class RecordingEvaluator:
    """Scores a subset with a weighted bit sum and remembers every call."""

    def __init__(self, weights: List[float]) -> None:
        self.weights = weights
        self.seen: List[BitVector] = []

    def evaluate(self, subset: BitVector) -> float:
        self.seen.append(subset.clone())
        return sum(self.weights[i] for i in subset.indices())


def _unique_weights(n: int) -> List[float]:
    # every subset gets a distinct merit
    return [2.0 ** -(i + 1) for i in range(n)]


def test_determinism_for_a_fixed_seed() -> None:
    dataset = DatasetContext(20, True, 19)
    cfg = PSOConfig(population_size=8, iterations=10, mutation_probability=0.05, seed=17)
    first = GeometricPSO(cfg).search(RecordingEvaluator(_unique_weights(20)), dataset)
    second = GeometricPSO(cfg).search(RecordingEvaluator(_unique_weights(20)), dataset)
    assert first.selected == second.selected
    assert first.report == second.report
    assert first.history == second.history


def test_different_seeds_explore_differently() -> None:
    dataset = DatasetContext(30, False)
    a = RecordingEvaluator(_unique_weights(30))
    b = RecordingEvaluator(_unique_weights(30))
    GeometricPSO(PSOConfig(population_size=5, iterations=2, seed=1)).search(a, dataset)
    GeometricPSO(PSOConfig(population_size=5, iterations=2, seed=2)).search(b, dataset)
    assert a.seen[:5] != b.seen[:5]


def test_class_bit_is_never_set() -> None:
    dataset = DatasetContext(12, True, 7)
    evaluator = RecordingEvaluator(_unique_weights(12))
    cfg = PSOConfig(population_size=10, iterations=15, mutation_probability=0.3, seed=5)
    engine = GeometricPSO(cfg)
    result = engine.search(evaluator, dataset)
    assert all(not s.test_bit(7) for s in evaluator.seen)
    assert all(not p.position.test_bit(7) for p in engine.population.particles)
    assert all(not p.position.test_bit(7) for p in engine.population.personal_bests)
    assert 7 not in result.selected


def test_evaluator_called_once_per_distinct_subset() -> None:
    dataset = DatasetContext(6, True, 5)
    evaluator = RecordingEvaluator([0.5, -0.2, 0.3, -0.1, 0.05, 0.0])
    cfg = PSOConfig(population_size=10, iterations=20, mutation_probability=0.05, seed=3)
    result = GeometricPSO(cfg).search(evaluator, dataset)
    keys = [s.key() for s in evaluator.seen]
    assert len(keys) == len(set(keys))
    assert result.cache_misses == len(keys)
    assert result.cache_hits + result.cache_misses == 10 * (result.generations_run + 1)


def test_global_best_is_monotone() -> None:
    dataset = DatasetContext(16, True, 15)
    evaluator = FunctionSubsetEvaluator(lambda s: float(s.test_bit(0) + s.test_bit(3) - 0.1 * s.pop_count()))
    cfg = PSOConfig(population_size=6, iterations=25, mutation_probability=0.1, seed=8)
    result = GeometricPSO(cfg).search(evaluator, dataset)
    history = result.history
    for prev, cur in zip(history, history[1:]):
        assert cur["best_objective"] >= prev["best_objective"] - 1e-12
        if abs(cur["best_objective"] - prev["best_objective"]) < 1e-6:
            assert cur["best_feature_count"] <= prev["best_feature_count"]
    assert result.best_objective == history[-1]["best_objective"]


def test_flat_generation_stops_the_run() -> None:
    dataset = DatasetContext(10, True, 9)
    evaluator = FunctionSubsetEvaluator(lambda s: 1.0)
    engine = GeometricPSO(PSOConfig(population_size=5, iterations=50, seed=2))
    result = engine.search(evaluator, dataset)
    assert result.converged
    assert result.generations_run == 1
    assert engine.state is SearchState.DONE
    smallest = min(p.position.pop_count() for p in engine.population.particles)
    assert result.best_feature_count <= smallest
    assert "Generation: 1\n" in result.report
    assert "Generation: 2\n" not in result.report


def test_small_subset_scenario() -> None:
    dataset = DatasetContext(5, True, 4)
    evaluator = RecordingEvaluator([-1.0] * 5)
    cfg = PSOConfig(population_size=4, iterations=3, mutation_probability=0.0,
                    inertia_weight=0.33, social_weight=0.33, individual_weight=0.34)
    result = GeometricPSO(cfg).search(evaluator, dataset)
    counts = [row["best_feature_count"] for row in result.history]
    assert all(b <= a for a, b in zip(counts, counts[1:]))
    assert 4 not in result.selected
    assert all(not s.test_bit(4) for s in evaluator.seen)
    assert result.best_objective == -float(result.best_feature_count)


def test_start_set_is_the_first_evaluated_subset() -> None:
    dataset = DatasetContext(5, True, 4)
    evaluator = RecordingEvaluator(_unique_weights(5))
    result = GeometricPSO(PSOConfig(population_size=4, iterations=2, start_set="1,3")).search(evaluator, dataset)
    assert evaluator.seen[0].indices() == [0, 2]
    assert "\tStart set: 1,3\n" in result.report


def test_start_set_of_only_the_class_seeds_an_empty_particle() -> None:
    dataset = DatasetContext(5, True, 4)
    evaluator = RecordingEvaluator(_unique_weights(5))
    result = GeometricPSO(PSOConfig(population_size=3, iterations=1, start_set="5")).search(evaluator, dataset)
    assert evaluator.seen[0].indices() == []
    assert "\tStart set: 5\n" in result.report


def test_start_set_is_echoed_as_typed() -> None:
    dataset = DatasetContext(6, True, 5)
    result = GeometricPSO(PSOConfig(population_size=3, iterations=1, start_set="1-3")).search(
        RecordingEvaluator(_unique_weights(6)), dataset)
    assert "\tStart set: 1-3\n" in result.report


def test_report_layout() -> None:
    dataset = DatasetContext(30, False)
    cfg = PSOConfig(population_size=6, iterations=4, report_frequency=2,
                    mutation_probability=0.5, seed=4)
    result = GeometricPSO(cfg).search(RecordingEvaluator(_unique_weights(30)), dataset)
    assert not result.converged
    report = result.report
    assert report.startswith("\nInitial population\nmerit   \tscaled  \tsubset\n")
    assert "Generation: 1\n" not in report
    assert "Generation: 2\n" in report
    assert "Generation: 3\n" not in report
    assert "Generation: 4\n" in report
    assert report.count("merit   \tscaled  \tsubset") == 3
    assert "\tPSO Search.\n\tStart set: no attributes\n\tPopulation size: 6\n" in report
    assert "\tReport frequency: 2\n\tSeed: 4\n" in report
    block = report.split("Generation: 4\n")[1].split("\n")
    rows = block[1:7]
    for row in rows:
        merit, scaled, subset = row.split("\t")
        assert len(merit) == 8 and len(scaled) == 8
        assert all(int(tok) >= 1 for tok in subset.split())


def test_parallel_evaluation_matches_sequential() -> None:
    dataset = DatasetContext(14, True, 13)
    base = dict(population_size=8, iterations=8, mutation_probability=0.1, seed=21)
    seq = GeometricPSO(PSOConfig(**base)).search(RecordingEvaluator(_unique_weights(14)), dataset)
    par_eval = RecordingEvaluator(_unique_weights(14))
    par = GeometricPSO(PSOConfig(n_jobs=4, **base)).search(par_eval, dataset)
    assert par.selected == seq.selected
    assert par.report == seq.report
    keys = [s.key() for s in par_eval.seen]
    assert len(keys) == len(set(keys))


def test_unsupervised_evaluator_ignores_class() -> None:
    dataset = DatasetContext(4, True, 3)
    engine = GeometricPSO(PSOConfig(population_size=3, iterations=1))
    engine.search(FunctionSubsetEvaluator(lambda s: s.pop_count(), supervised=False), dataset)
    assert engine.class_index is None


def test_rejects_non_subset_evaluator() -> None:
    with pytest.raises(EvaluatorTypeMismatch):
        GeometricPSO().search(object(), DatasetContext(5, True, 4))


def test_evaluator_failure_aborts_the_run() -> None:
    def boom(subset: BitVector) -> float:
        raise ValueError("classifier exploded")

    with pytest.raises(EvaluationFailure, match="classifier exploded") as info:
        GeometricPSO(PSOConfig(population_size=3, iterations=2)).search(
            FunctionSubsetEvaluator(boom), DatasetContext(5, True, 4))
    assert isinstance(info.value.__cause__, ValueError)


def test_dataset_without_selectable_attributes() -> None:
    with pytest.raises(InvalidConfiguration):
        GeometricPSO().search(FunctionSubsetEvaluator(lambda s: 0.0), DatasetContext(1, True, 0))


def test_start_set_out_of_range() -> None:
    with pytest.raises(InvalidConfiguration):
        GeometricPSO(PSOConfig(start_set="9")).search(
            FunctionSubsetEvaluator(lambda s: 0.0), DatasetContext(5, True, 4))


def test_functional_entry_point() -> None:
    selected, report = pso_search(PSOConfig(population_size=4, iterations=3),
                                  DatasetContext(8, True, 7),
                                  FunctionSubsetEvaluator(lambda s: -s.pop_count()))
    assert isinstance(selected, list)
    assert 7 not in selected
    assert "Initial population" in report
