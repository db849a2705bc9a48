from __future__ import annotations

from typing import Iterator, NamedTuple

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .types import Lengths


class RangeEntry(NamedTuple):
    start: float
    weight: float

    @property
    def end(self) -> float:
        return self.start + self.weight


class RangeTable:
    """
    Cumulative normalized arc-length ranges, one `[start, start+weight)`
    interval per segment.

    When the total length is zero every entry is (0, 0) and `find_index`
    answers 0 for any weight.
    """

    @jaxtyped(typechecker=beartype)
    def __init__(self, lengths: Lengths) -> None:
        L = np.asarray(lengths, dtype=np.float64)
        if L.shape[0] == 0:
            raise ValueError("RangeTable needs at least one segment")
        if not np.isfinite(L).all() or (L < 0.0).any():
            raise ValueError("segment lengths must be finite and >= 0")
        total = float(np.sum(L))
        self.total = total
        if total > 0.0:
            self.weights = L / total
        else:
            self.weights = np.zeros_like(L)
        # cumsum adds in the same order, so starts[i] + weights[i] == starts[i+1]
        # holds exactly.
        acc = np.cumsum(self.weights)
        self.starts = np.concatenate([[0.0], acc[:-1]])
        self.ends = acc
        self.weights.setflags(write=False)
        self.starts.setflags(write=False)
        self.ends.setflags(write=False)

    def __len__(self) -> int:
        return int(self.weights.shape[0])

    def __getitem__(self, i: int) -> RangeEntry:
        return RangeEntry(float(self.starts[i]), float(self.weights[i]))

    def __iter__(self) -> Iterator[RangeEntry]:
        for i in range(len(self)):
            yield self[i]

    @property
    def is_degenerate(self) -> bool:
        return self.total <= 0.0

    def find_index(self, weight: float) -> int:
        """
        Segment owning `weight`, assumed normalized into [0, 1).
        Zero-weight segments own nothing, so a boundary weight resolves to the
        next segment with a non-empty interval.
        """
        if self.is_degenerate:
            return 0
        i = int(np.searchsorted(self.starts, weight, side="right")) - 1
        return min(max(i, 0), len(self) - 1)

    def local_parameter(self, i: int, weight: float) -> float:
        """Map a curve weight into segment i's own [0,1] parameter."""
        w = float(self.weights[i])
        if w == 0.0:
            return 0.0
        return (weight - float(self.starts[i])) / w
