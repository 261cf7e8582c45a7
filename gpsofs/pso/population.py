"""
Swarm state: particles, their personal bests, and per-generation statistics.
"""
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from gpsofs.pso.bitvector import BitVector
from gpsofs.pso.tracker import is_preferred


@dataclass
class Particle:
    position: BitVector
    objective: Optional[float] = None
    fitness: Optional[float] = None


@dataclass
class PersonalBest:
    position: BitVector
    objective: Optional[float] = None

    def offer(self, position, objective):
        """Keep `position` if it beats the stored one; returns True on update."""
        if self.objective is None or is_preferred(objective, position.pop_count(),
                                                  self.objective, self.position.pop_count()):
            self.position = position.clone()
            self.objective = float(objective)
            return True
        return False


class Population:
    def __init__(self, particles, personal_bests):
        if len(particles) < 1 or len(particles) != len(personal_bests):
            raise ValueError("need at least one particle and one personal best per particle")
        self.particles: List[Particle] = particles
        self.personal_bests: List[PersonalBest] = personal_bests
        self.min_fitness = self.max_fitness = self.sum_fitness = self.avg_fitness = 0.0

    @property
    def size(self):
        return len(self.particles)

    @classmethod
    def initialize(cls, pop_size, num_attributes, rng, class_index=None, starting=None):
        """
        Random swarm. With `starting` (0-based indices), particle 0 is that
        subset and consumes no random draws.
        """
        if class_index is not None:
            selectable = num_attributes - 1 if 0 <= class_index < num_attributes else num_attributes
        else:
            selectable = num_attributes
        if selectable < 1:
            raise ValueError("no selectable attribute to build a population from")

        positions = []
        if starting is not None:
            positions.append(BitVector(num_attributes, [i for i in starting if i != class_index]))
        for _ in range(len(positions), pop_size):
            positions.append(random_position(num_attributes, rng, class_index))

        particles = [Particle(p) for p in positions]
        pbests = [PersonalBest(p.clone()) for p in positions]
        return cls(particles, pbests)

    def objectives(self):
        return np.array([p.objective for p in self.particles], dtype=float)

    def compute_statistics(self):
        obj = self.objectives()
        self.min_fitness = float(obj.min())
        self.max_fitness = float(obj.max())
        self.sum_fitness = float(obj.sum())
        self.avg_fitness = self.sum_fitness / self.size
        return self.min_fitness, self.max_fitness, self.avg_fitness

    def update_personal_best(self, index):
        particle = self.particles[index]
        return self.personal_bests[index].offer(particle.position, particle.objective)


def random_position(num_attributes, rng, class_index=None):
    """
    Draw a bit count k from |U[-(n-1), n-1] - 1| (0 becomes 1), then k bit
    positions in [0, n), redrawing the class index. Repeats collapse.
    """
    n = num_attributes
    k = abs(int(rng.integers(-(n - 1), n)) - 1)
    if k == 0:
        k = 1
    position = BitVector(n)
    for _ in range(k):
        while True:
            bit = int(rng.integers(0, n))
            if class_index is None or bit != class_index:
                break
        position.set_bit(bit)
    return position
