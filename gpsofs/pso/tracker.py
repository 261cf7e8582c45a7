"""
Best tracking: the tie-break rule shared by personal and global bests,
per-generation local best selection, and convergence detection.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from gpsofs.pso.bitvector import BitVector

EPS = 1e-6

logger = logging.getLogger(__name__)


def objectives_equal(a, b):
    return abs(a - b) < EPS


def is_preferred(objective_a, count_a, objective_b, count_b):
    """
    True if A beats B: higher objective, or equal objective (within EPS)
    with strictly fewer selected attributes.
    """
    if objective_a > objective_b:
        return True
    return objectives_equal(objective_a, objective_b) and count_a < count_b


@dataclass
class GlobalBest:
    position: BitVector
    objective: float
    feature_count: int


class BestTracker:
    def __init__(self):
        self.best: Optional[GlobalBest] = None

    @staticmethod
    def local_best(population):
        """
        Return (particle, converged) for the current generation.
        A diverse population is scanned with the tie-break rule; a flat one
        (max == min) yields its smallest subset and signals convergence.
        """
        particles = population.particles
        if population.max_fitness - population.min_fitness > 0:
            best = None
            best_objective = float("-inf")
            best_count = None
            for particle in particles:
                count = particle.position.pop_count()
                if best is None or is_preferred(particle.objective, count, best_objective, best_count):
                    best, best_objective, best_count = particle, particle.objective, count
            return best, False

        best = min(particles, key=lambda p: p.position.pop_count())
        return best, True

    def update(self, population):
        """
        Fold this generation into the global best; returns the convergence flag.
        A tie within EPS only replaces the global best when its objective is not
        lower, so the global best objective never decreases.
        """
        local, converged = self.local_best(population)
        count = local.position.pop_count()
        if self.best is None or (is_preferred(local.objective, count,
                                              self.best.objective, self.best.feature_count)
                                 and local.objective >= self.best.objective):
            if self.best is not None:
                logger.debug("global best improved: %.6f (%d attrs) -> %.6f (%d attrs)",
                             self.best.objective, self.best.feature_count, local.objective, count)
            self.best = GlobalBest(local.position.clone(), float(local.objective), count)
        return converged
