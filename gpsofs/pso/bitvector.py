"""
Fixed-length bit vector encoding an attribute subset.
Bit i set <=> attribute i selected. Backed by a numpy bool array.
"""
import numpy as np


class BitVector:
    __slots__ = ("_bits",)

    def __init__(self, num_attributes, indices=None):
        if num_attributes < 0:
            raise ValueError(f"num_attributes must be >= 0, got {num_attributes}")
        self._bits = np.zeros(int(num_attributes), dtype=bool)
        if indices is not None:
            for i in indices:
                self.set_bit(i)

    @classmethod
    def from_mask(cls, mask):
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim != 1:
            raise ValueError("mask must be one-dimensional")
        vec = cls(mask.shape[0])
        vec._bits[:] = mask
        return vec

    def __len__(self):
        return self._bits.shape[0]

    @property
    def num_attributes(self):
        return self._bits.shape[0]

    def _check(self, i):
        if i < 0 or i >= self._bits.shape[0]:
            raise IndexError(f"bit {i} out of range [0, {self._bits.shape[0]})")

    def set_bit(self, i):
        self._check(i)
        self._bits[i] = True

    def clear_bit(self, i):
        self._check(i)
        self._bits[i] = False

    def test_bit(self, i):
        self._check(i)
        return bool(self._bits[i])

    def pop_count(self):
        return int(np.count_nonzero(self._bits))

    def indices(self):
        """0-based indices of the set bits, ascending."""
        return [int(i) for i in np.flatnonzero(self._bits)]

    def to_mask(self):
        return self._bits.copy()

    def assign(self, mask):
        """Overwrite the content in place (length must match)."""
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != self._bits.shape:
            raise ValueError(f"mask shape {mask.shape} != {self._bits.shape}")
        self._bits[:] = mask

    def clone(self):
        vec = BitVector(0)
        vec._bits = self._bits.copy()
        return vec

    def key(self):
        # packed bytes alone are ambiguous across lengths (trailing pad bits)
        return (self._bits.shape[0], np.packbits(self._bits).tobytes())

    def to_string(self):
        """1-based attribute numbers, each followed by a space."""
        return "".join(f"{i + 1} " for i in self.indices())

    def to_chromosome(self):
        return "".join("1" if b else "0" for b in self._bits)

    def __eq__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self._bits.shape == other._bits.shape and bool(np.array_equal(self._bits, other._bits))

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return f"BitVector({self.num_attributes}, {self.indices()})"
