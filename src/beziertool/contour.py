from __future__ import annotations

from typing import Sequence

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from ..utils import debug
from .anchor import Anchor
from .curve import build_splines
from .spline import (
    DEFAULT_STEP_COUNT,
    Spline,
    estimate_length,
    evaluate,
    evaluate_many,
    round_count,
)
from .types import Points, Vec2


class Contour:
    """Per-segment parametric sampler; cheaper than `Curve`, no range table."""

    def __init__(
        self,
        anchors: Sequence[Anchor],
        closed: bool,
        step_count: int = DEFAULT_STEP_COUNT,
    ) -> None:
        self.closed = closed
        self.splines: tuple[Spline, ...] = tuple(build_splines(anchors, closed))
        self.lengths = np.array(
            [estimate_length(sp, step_count) for sp in self.splines],
            dtype=np.float64,
        )
        self.lengths.setflags(write=False)

    def segment_counts(self, step: float) -> list[int]:
        return [max(1, round_count(float(dl) / step)) for dl in self.lengths]

    @jaxtyped(typechecker=beartype)
    def sample_points(self, step: float | int, offset: Vec2 | None = None) -> Points:
        """
        Each segment contributes round(length/step) points (at least one) at
        t = 0, 1/n, ..., (n-1)/n; the final endpoint is appended once.
        """
        if not step > 0.0:
            raise ValueError("step must be > 0")
        step = float(step)
        pos = (
            np.zeros(2, dtype=np.float64)
            if offset is None
            else np.asarray(offset, dtype=np.float64)
        )
        counts = self.segment_counts(step)
        chunks = [
            evaluate_many(sp, np.arange(n, dtype=np.float64) / n)
            for sp, n in zip(self.splines, counts)
        ]
        chunks.append(evaluate(self.splines[-1], 1.0)[None, :])
        result = np.concatenate(chunks, axis=0) + pos
        debug.log(f"contour: segments={len(self.splines)} points={result.shape[0]}")
        return result
