from __future__ import annotations

import numpy as np

from gpsofs.pso.bitvector import BitVector
from gpsofs.pso.operators import bit_flip_mutation, three_parent_crossover


def _donors(n: int = 12):
    current = BitVector(n, [0, 1, 2, 3])
    gbest = BitVector(n, [4, 5, 6, 7])
    pbest = BitVector(n, [8, 9, 10, 11])
    return current, gbest, pbest


def test_inertia_only_keeps_current_position() -> None:
    current, gbest, pbest = _donors()
    three_parent_crossover(current, gbest, pbest, np.random.default_rng(0), 1.0, 0.0)
    assert current.indices() == [0, 1, 2, 3]


def test_social_only_copies_global_best() -> None:
    current, gbest, pbest = _donors()
    three_parent_crossover(current, gbest, pbest, np.random.default_rng(0), 0.0, 1.0)
    assert current == gbest


def test_individual_only_copies_personal_best() -> None:
    current, gbest, pbest = _donors()
    three_parent_crossover(current, gbest, pbest, np.random.default_rng(0), 0.0, 0.0)
    assert current == pbest


def test_offspring_lies_between_the_three_donors() -> None:
    rng = np.random.default_rng(42)
    n = 64
    for _ in range(20):
        donors = [BitVector.from_mask(rng.random(n) < 0.5) for _ in range(3)]
        current = donors[0].clone()
        three_parent_crossover(current, donors[1], donors[2], rng, 0.33, 0.33)
        out = current.to_mask()
        masks = [d.to_mask() for d in donors]
        assert np.all((out == masks[0]) | (out == masks[1]) | (out == masks[2]))


def test_one_draw_per_bit() -> None:
    rng = np.random.default_rng(7)
    ref = np.random.default_rng(7)
    current, gbest, pbest = _donors(12)
    three_parent_crossover(current, gbest, pbest, rng, 0.33, 0.33)
    ref.random(12)
    assert rng.bit_generator.state == ref.bit_generator.state

    bit_flip_mutation(current, rng, 0.1)
    ref.random(12)
    assert rng.bit_generator.state == ref.bit_generator.state


def test_mutation_extremes_and_protected_bit() -> None:
    vec = BitVector(6, [0, 1])
    bit_flip_mutation(vec, np.random.default_rng(1), 0.0)
    assert vec.indices() == [0, 1]

    bit_flip_mutation(vec, np.random.default_rng(1), 1.0, protected_index=5)
    assert vec.indices() == [2, 3, 4]
