from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from ..utils import debug, debug_helpers
from .anchor import Anchor
from .range_table import RangeTable
from .spline import (
    DEFAULT_STEP_COUNT,
    Spline,
    build_spline,
    estimate_length,
    evaluate,
    round_count,
)
from .types import Points, Vec2


def build_splines(anchors: Sequence[Anchor], closed: bool) -> list[Spline]:
    """
    One spline per adjacent anchor pair; closed curves add the wrap segment
    from the last anchor back to the first.
    """
    n = len(anchors)
    if n < 2:
        raise ValueError("a curve needs at least 2 anchors")
    for k, a in enumerate(anchors):
        if not a.is_finite():
            raise ValueError(f"anchor {k} has non-finite coordinates")
    m = n if closed else n - 1
    return [build_spline(anchors[i], anchors[(i + 1) % n]) for i in range(m)]


def _offset_or_zero(offset: np.ndarray | None) -> np.ndarray:
    if offset is None:
        return np.zeros(2, dtype=np.float64)
    return np.asarray(offset, dtype=np.float64)


class Curve:
    """
    Arc-length parameterized composite of splines.

    Positions along the curve are expressed as weights: fractions of the total
    length in [0, 1). The curve is a snapshot; edit the anchors and rebuild to
    see changes.
    """

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
        self.ranges = RangeTable(self.lengths)
        self.length = self.ranges.total
        if self.ranges.is_degenerate:
            debug_helpers.log_once(
                "curve-zero-length",
                "curve has zero total length; every weight maps to segment 0",
            )
        debug.log(
            f"curve: segments={len(self.splines)} closed={closed} "
            f"length={self.length:.6g}"
        )

    @property
    def segment_count(self) -> int:
        return len(self.splines)

    def normalize(self, weight: float) -> float:
        if self.closed:
            return weight - math.floor(weight)
        return min(1.0, max(0.0, weight))

    def point_at(self, weight: float) -> np.ndarray:
        """Point at an already normalized weight."""
        i = self.ranges.find_index(weight)
        return self._evaluate_in(i, weight)

    @jaxtyped(typechecker=beartype)
    def point_at_weight(self, weight: float | int) -> Vec2:
        return self.point_at(self.normalize(float(weight)))

    def _evaluate_in(self, i: int, weight: float) -> np.ndarray:
        k = self.ranges.local_parameter(i, weight)
        return evaluate(self.splines[i], k)

    def _end_point(self, end: float) -> np.ndarray:
        if end >= 1.0:
            return evaluate(self.splines[-1], 1.0)
        return self.point_at(end)

    def _advance(self, i: int, weight: float) -> int:
        if self.ranges.is_degenerate:
            return 0
        ends = self.ranges.ends
        last = len(self.splines) - 1
        while i < last and weight >= ends[i]:
            i += 1
        return i

    @jaxtyped(typechecker=beartype)
    def uniform_samples(
        self,
        step: float | int,
        offset: Vec2 | None = None,
    ) -> Points:
        """
        round(length/step)+1 points at equal arc-length spacing over the whole
        curve. The last point is the final spline's endpoint exactly.
        """
        if not step > 0.0:
            raise ValueError("step must be > 0")
        step = float(step)
        pos = _offset_or_zero(offset)
        m = max(1, round_count(self.length / step))
        result = np.empty((m + 1, 2), dtype=np.float64)
        ds = 1.0 / m
        cursor = 0.0
        i = 0
        for j in range(m):
            i = self._advance(i, cursor)
            result[j] = self._evaluate_in(i, cursor) + pos
            cursor += ds
        result[m] = evaluate(self.splines[-1], 1.0) + pos
        return result

    @jaxtyped(typechecker=beartype)
    def range_samples(
        self,
        start: float | int,
        end: float | int,
        step_weight: float | int,
        offset: Vec2 | None = None,
    ) -> Points:
        """
        Points along the sub-arc [start, end], spaced by about `step_weight`.

        Closed curves always run forward and wrap through 0 when end < start.
        Open curves clamp both weights into [0,1] and swap them if reversed.
        """
        if not step_weight > 0.0:
            raise ValueError("step_weight must be > 0")
        start, end, step_weight = float(start), float(end), float(step_weight)
        pos = _offset_or_zero(offset)
        if self.closed:
            start = self.normalize(start)
            end = self.normalize(end)
            width = end - start if end >= start else 1.0 + (end - start)
        else:
            start = self.normalize(start)
            end = self.normalize(end)
            if start > end:
                start, end = end, start
            width = end - start

        i = self.ranges.find_index(start)
        if width < 0.005 * step_weight:
            return (self._evaluate_in(i, start) + pos)[None, :]

        count = max(1, round_count(width / step_weight))
        s = width / count
        result = np.empty((count + 1, 2), dtype=np.float64)
        cursor = start
        wrapped = False
        for j in range(count + 1):
            if self.closed:
                if cursor >= 1.0:
                    cursor -= 1.0
                    if not wrapped:
                        wrapped = True
                        i = 0
            elif cursor >= end:
                # open curves stop at the end weight; pad with the end point
                end_point = self._end_point(end) + pos
                result[j:] = end_point
                break
            i = self._advance(i, cursor)
            result[j] = self._evaluate_in(i, cursor) + pos
            cursor += s
        return result
