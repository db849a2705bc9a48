from __future__ import annotations

import numpy as np
from beartype import beartype
from jaxtyping import Float, jaxtyped

from .types import Points, Vec2

_TINY = 1e-6


def normalized(v: np.ndarray) -> np.ndarray:
    """Unit vector along v, or the zero vector when v is (nearly) zero."""
    n = float(np.linalg.norm(v))
    if n <= _TINY:
        return np.zeros(2, dtype=np.float64)
    return v / n


@jaxtyped(typechecker=beartype)
def line_intersection(
    a0: Vec2,
    a1: Vec2,
    b0: Vec2,
    b1: Vec2,
    eps: float = 1e-9,
) -> Vec2 | None:
    """
    Intersection of the infinite lines (a0,a1) and (b0,b1), or None when they
    are parallel.
    """
    da = a0 - a1
    db = b0 - b1
    divider = float(da[0] * db[1] - da[1] * db[0])
    if abs(divider) <= eps:
        return None
    xa = float(a0[0] * a1[1] - a0[1] * a1[0])
    xb = float(b0[0] * b1[1] - b0[1] * b1[0])
    x = xa * db[0] - da[0] * xb
    y = xa * db[1] - da[1] * xb
    return np.array([x, y], dtype=np.float64) / divider


@jaxtyped(typechecker=beartype)
def point_edges_dist2(p: Vec2, a: Points, b: Points) -> Float[np.ndarray, "N"]:
    """Squared distance from p to every edge (a[k], b[k])."""
    ab = b - a
    denom = np.sum(ab * ab, axis=-1)
    safe = np.where(denom > _TINY * _TINY, denom, 1.0)
    t = np.where(denom > _TINY * _TINY, np.sum((p - a) * ab, axis=-1) / safe, 0.0)
    t = np.clip(t, 0.0, 1.0)
    q = a + t[:, None] * ab
    d = p - q
    return np.sum(d * d, axis=-1)
