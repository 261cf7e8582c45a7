#!/usr/bin/env python3
"""
Geometric PSO attribute subset search.

Particles are bit vectors over attribute indices. Each generation every
particle is moved with 3PBMCX toward its personal best and the global best,
bit-flip mutated, and scored through a content-keyed fitness cache. The run
stops after `iterations` generations or as soon as a generation is flat
(all particles share the same raw merit).

References:
 - Moraglio, Di Chio, Poli. Geometric Particle Swarm Optimisation. EuroGP 2007.
 - Garcia-Nieto, Alba, Jourdan, Talbi. Sensitivity and specificity based
   multiobjective approach for feature selection. IPL 109(16), 2009.

Random draws, in order: population initialization, then per generation and per
particle (ascending) its crossover draws followed by its mutation draws.
"""
import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from gpsofs.pso.cache import FitnessCache
from gpsofs.pso.config import PSOConfig
from gpsofs.pso.errors import EvaluationFailure, EvaluatorTypeMismatch, InvalidConfiguration
from gpsofs.pso.evaluators import DatasetContext, class_index_in_effect, is_subset_evaluator
from gpsofs.pso.operators import bit_flip_mutation, three_parent_crossover
from gpsofs.pso.population import Population
from gpsofs.pso.report import config_summary, population_report
from gpsofs.pso.scaling import FitnessScaler
from gpsofs.pso.tracker import BestTracker


class SearchState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    DONE = "done"


@dataclass
class SearchResult:
    selected: List[int]
    report: str
    best_objective: float
    best_feature_count: int
    generations_run: int
    converged: bool
    history: List[Dict[str, Any]] = field(default_factory=list)
    cache_hits: int = 0
    cache_misses: int = 0

    def selected_names(self, dataset: DatasetContext) -> List[str]:
        return [dataset.attribute_name(i) for i in self.selected]


class GeometricPSO:
    def __init__(self, config: Optional[PSOConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = (config or PSOConfig()).validate()
        self.logger = logger or logging.getLogger(__name__)
        self.state = SearchState.UNINITIALIZED
        self.scaler = FitnessScaler()
        self.rng: Optional[np.random.Generator] = None
        self.cache: Optional[FitnessCache] = None
        self.tracker: Optional[BestTracker] = None
        self.population: Optional[Population] = None
        self.class_index: Optional[int] = None
        self.starting: Optional[List[int]] = None
        self.history: List[Dict[str, Any]] = []

    # ------------------------------------------------------------------
    def search(self, evaluator, dataset: DatasetContext) -> SearchResult:
        cfg = self.config
        self.state = SearchState.UNINITIALIZED
        self._prepare(evaluator, dataset)
        self.logger.info("PSO search: %d particles, %d iterations, %d attributes, seed=%d",
                         cfg.population_size, cfg.iterations, dataset.num_attributes, cfg.seed)

        self.rng = np.random.default_rng(cfg.seed)
        self.cache = FitnessCache()
        self.tracker = BestTracker()
        self.history = []
        self.population = Population.initialize(cfg.population_size, dataset.num_attributes,
                                                self.rng, self.class_index, self.starting)
        self.state = SearchState.INITIALIZED

        reports = []
        self._evaluate_population(evaluator)
        self._finish_generation(0)
        reports.append(population_report(self.population, 0))
        self.state = SearchState.RUNNING

        converged = False
        generation = 0
        report_every = cfg.effective_report_frequency
        for generation in range(1, cfg.iterations + 1):
            self._move_population()
            self._evaluate_population(evaluator)
            converged = self._finish_generation(generation)
            if generation == cfg.iterations or generation % report_every == 0 or converged:
                reports.append(population_report(self.population, generation))
            if converged:
                break
        self.state = SearchState.CONVERGED if converged else SearchState.EXHAUSTED

        best = self.tracker.best
        stats = self.cache.stats()
        self.logger.info("PSO search %s after %d generations: merit=%.5f, %d attributes "
                         "(cache: %d entries, hit rate %.2f)",
                         self.state.value, generation, best.objective, best.feature_count,
                         stats["entries"], stats["hit_rate"])
        result = SearchResult(
            selected=best.position.indices(),
            report="".join(reports) + "\n" + config_summary(cfg, self.starting),
            best_objective=best.objective,
            best_feature_count=best.feature_count,
            generations_run=generation,
            converged=converged,
            history=list(self.history),
            cache_hits=self.cache.hits,
            cache_misses=self.cache.misses,
        )
        self.state = SearchState.DONE
        return result

    # ------------------------------------------------------------------
    def _prepare(self, evaluator, dataset):
        if not is_subset_evaluator(evaluator):
            raise EvaluatorTypeMismatch(f"{type(evaluator).__name__} is not a Subset evaluator!")
        self.class_index = class_index_in_effect(evaluator, dataset)
        selectable = dataset.num_attributes - (1 if self.class_index is not None else 0)
        if selectable < 1:
            raise InvalidConfiguration(
                f"Dataset with {dataset.num_attributes} attributes has nothing to select")
        starting = self.config.resolve_start_set(dataset.num_attributes)
        if starting is not None:
            starting = [i for i in starting if i != self.class_index]
        # an empty list still seeds particle 0 (as the empty subset)
        self.starting = starting

    def _score(self, evaluator, position):
        try:
            return float(evaluator.evaluate(position.clone()))
        except Exception as exc:
            raise EvaluationFailure(
                f"Evaluation of subset [{position.to_string().strip()}] failed: {exc}") from exc

    def _evaluate_population(self, evaluator):
        if self.config.n_jobs > 1:
            self._evaluate_parallel(evaluator)
            return
        for i, particle in enumerate(self.population.particles):
            entry = self.cache.lookup(particle.position)
            if entry is None:
                particle.objective = self._score(evaluator, particle.position)
                self.cache.insert(particle.position, particle.objective)
            else:
                particle.objective = entry.objective
            self.population.update_personal_best(i)

    def _evaluate_parallel(self, evaluator):
        particles = self.population.particles
        pending: Dict[Tuple[int, bytes], List[int]] = {}
        for i, particle in enumerate(particles):
            entry = self.cache.lookup(particle.position)
            if entry is None:
                pending.setdefault(particle.position.key(), []).append(i)
            else:
                particle.objective = entry.objective
        if pending:
            with ThreadPoolExecutor(max_workers=self.config.n_jobs) as pool:
                futures = {key: pool.submit(self._score, evaluator, particles[idx[0]].position)
                           for key, idx in pending.items()}
                for key, future in futures.items():
                    merit = future.result()
                    first = particles[pending[key][0]]
                    self.cache.insert(first.position, merit)
                    for i in pending[key]:
                        particles[i].objective = merit
        # barrier: every particle scored before bests move
        for i in range(self.population.size):
            self.population.update_personal_best(i)

    def _finish_generation(self, generation):
        pop = self.population
        pop.compute_statistics()
        self.scaler.apply(pop)
        converged = self.tracker.update(pop)
        best = self.tracker.best
        self.history.append({
            "generation": generation,
            "best_objective": best.objective,
            "best_feature_count": best.feature_count,
            "min_fitness": pop.min_fitness,
            "max_fitness": pop.max_fitness,
            "avg_fitness": pop.avg_fitness,
            "converged": converged,
        })
        self.logger.debug("gen %d: min=%.5f max=%.5f avg=%.5f best=%.5f (%d attrs)%s",
                          generation, pop.min_fitness, pop.max_fitness, pop.avg_fitness,
                          best.objective, best.feature_count, " converged" if converged else "")
        return converged

    def _move_population(self):
        cfg = self.config
        gbest = self.tracker.best.position
        for particle, pbest in zip(self.population.particles, self.population.personal_bests):
            three_parent_crossover(particle.position, gbest, pbest.position, self.rng,
                                   cfg.inertia_weight, cfg.social_weight)
            bit_flip_mutation(particle.position, self.rng, cfg.mutation_probability,
                              self.class_index)


def pso_search(config: PSOConfig, dataset: DatasetContext, evaluator) -> Tuple[List[int], str]:
    """Functional entry point: selected 0-based attribute indices and the text report."""
    result = GeometricPSO(config).search(evaluator, dataset)
    return result.selected, result.report
