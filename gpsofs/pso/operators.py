"""
Particle movement operators on bit vectors.

 - three_parent_crossover (3PBMCX): every bit of the new position is copied from
   one of three donors (current position, global best, personal best), chosen by
   partitioning [0,1) with the inertia / social / individual weights.
 - bit_flip_mutation: every bit flipped independently with probability p.

Both consume exactly one uniform draw per bit, in ascending bit order.
"""
import numpy as np


def three_parent_crossover(position, global_best, personal_best, rng,
                           inertia_weight, social_weight):
    """
    Replace `position` in place with its 3PBMCX offspring.
    individual_weight is implied (1 - inertia - social): any draw past
    inertia+social selects the personal best bit.
    """
    n = len(position)
    if len(global_best) != n or len(personal_best) != n:
        raise ValueError("all three donors must have the same length")
    r = rng.random(n)
    current = position.to_mask()
    social = (r >= inertia_weight) & (r < inertia_weight + social_weight)
    individual = r >= inertia_weight + social_weight
    new = np.where(social, global_best.to_mask(),
                   np.where(individual, personal_best.to_mask(), current))
    position.assign(new)
    return position


def bit_flip_mutation(position, rng, probability, protected_index=None):
    """
    Flip each bit with `probability`. `protected_index` (the class attribute)
    still consumes its draw but is never flipped.
    """
    n = len(position)
    r = rng.random(n)
    flip = r < probability
    if protected_index is not None and 0 <= protected_index < n:
        flip[protected_index] = False
    position.assign(np.logical_xor(position.to_mask(), flip))
    return position
