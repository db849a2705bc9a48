from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .anchor import Anchor
from .types import Params, Points, Vec2

DEFAULT_STEP_COUNT = 20


@dataclass(frozen=True, eq=False)
class Line:
    a: np.ndarray
    b: np.ndarray


@dataclass(frozen=True, eq=False)
class Quadratic:
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray  # control point


@dataclass(frozen=True, eq=False)
class Cubic:
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray  # control point next to a
    d: np.ndarray  # control point next to b


Spline: TypeAlias = Line | Quadratic | Cubic


def round_count(x: float) -> int:
    """Round half up, the way point counts are derived from lengths."""
    return int(math.floor(x + 0.5))


def _lerp(p: np.ndarray, q: np.ndarray, k: float | np.ndarray) -> np.ndarray:
    return p + k * (q - p)


def _de_casteljau(spline: Spline, k: float | np.ndarray) -> np.ndarray:
    match spline:
        case Line(a=a, b=b):
            return _lerp(a, b, k)
        case Quadratic(a=a, b=b, c=c):
            return _lerp(_lerp(a, c, k), _lerp(c, b, k), k)
        case Cubic(a=a, b=b, c=c, d=d):
            ac = _lerp(a, c, k)
            cd = _lerp(c, d, k)
            db = _lerp(d, b, k)
            return _lerp(_lerp(ac, cd, k), _lerp(cd, db, k), k)
    raise TypeError(f"unknown spline variant {type(spline).__name__}")


@jaxtyped(typechecker=beartype)
def evaluate(spline: Spline, t: float | int) -> Vec2:
    """Point at parameter t. Values outside [0,1] extrapolate."""
    return _de_casteljau(spline, float(t))


@jaxtyped(typechecker=beartype)
def evaluate_many(spline: Spline, ts: Params) -> Points:
    """Vectorized `evaluate` over a (K,) parameter array, returns (K,2)."""
    k = np.asarray(ts, dtype=np.float64)[:, None]
    return _de_casteljau(spline, k)


@jaxtyped(typechecker=beartype)
def estimate_length(spline: Spline, steps: int = DEFAULT_STEP_COUNT) -> float:
    """
    Polyline approximation of the arc length using `steps` equal parameter
    increments. Underestimates curved segments; the error shrinks as
    `steps` grows.
    """
    if steps < 1:
        raise ValueError("steps must be >= 1")
    pts = evaluate_many(spline, np.linspace(0.0, 1.0, steps + 1))
    return float(np.sum(np.linalg.norm(pts[1:] - pts[:-1], axis=1)))


@jaxtyped(typechecker=beartype)
def sample_points(spline: Spline, target_step_distance: float) -> Points:
    """
    n+1 points evenly spaced by parameter (not by arc length), where
    n = round(length / target_step_distance), at least 1.
    """
    if not target_step_distance > 0.0:
        raise ValueError("target_step_distance must be > 0")
    length = estimate_length(spline, DEFAULT_STEP_COUNT)
    n = max(1, round_count(length / target_step_distance))
    return evaluate_many(spline, np.arange(n + 1, dtype=np.float64) / n)


def build_spline(first: Anchor, second: Anchor) -> Spline:
    """Pick the cheapest representation the active handles allow."""
    out_active = first.kind.has_next
    in_active = second.kind.has_prev
    a = first.position.copy()
    b = second.position.copy()
    if out_active and in_active:
        return Cubic(a, b, first.next_point, second.prev_point)
    if out_active:
        return Quadratic(a, b, first.next_point)
    if in_active:
        return Quadratic(a, b, second.prev_point)
    return Line(a, b)

