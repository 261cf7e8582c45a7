"""
Linear static fitness scaling (Goldberg's prescale/scalepop).
Display only: scaled values never influence particle movement.
"""
import numpy as np

FMULTIPLE = 2.0


class FitnessScaler:
    def __init__(self, fmultiple=FMULTIPLE):
        self.fmultiple = float(fmultiple)

    def coefficients(self, min_fitness, max_fitness, avg_fitness):
        """
        Return (a, b) of scaled = a*objective + b. Degenerate populations give
        non-finite coefficients instead of raising.
        """
        fm = self.fmultiple
        mn, mx, avg = np.float64(min_fitness), np.float64(max_fitness), np.float64(avg_fitness)
        with np.errstate(divide="ignore", invalid="ignore"):
            if mn > (fm * avg - mx) / (fm - 1.0):
                delta = mx - avg
                a = (fm - 1.0) * avg / delta
                b = avg * (mx - fm * avg) / delta
            else:
                delta = avg - mn
                a = avg / delta
                b = -mn * avg / delta
        return float(a), float(b)

    def scale(self, objectives, min_fitness, max_fitness, avg_fitness):
        """Scaled fitness per objective; identity when the coefficients are not finite."""
        objectives = np.asarray(objectives, dtype=float)
        a, b = self.coefficients(min_fitness, max_fitness, avg_fitness)
        if not (np.isfinite(a) and np.isfinite(b)):
            return objectives.copy()
        return np.abs(a * objectives + b)

    def apply(self, population):
        """Set `fitness` on every particle of the population; returns the sum."""
        objectives = [p.objective for p in population.particles]
        scaled = self.scale(objectives, population.min_fitness,
                            population.max_fitness, population.avg_fitness)
        for particle, value in zip(population.particles, scaled):
            particle.fitness = float(value)
        return float(np.sum(scaled))
