from __future__ import annotations

import numpy as np

from . import debug

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def log_points(name: str, points: np.ndarray) -> None:
    """Summarize an (N,2) point array: count, finiteness and bounding box."""
    if not debug.is_verbose():
        return
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if pts.shape[0] == 0:
        debug.log(f"{name}: empty")
        return
    finite = np.isfinite(pts).all(axis=1)
    if finite.any():
        lo = pts[finite].min(axis=0)
        hi = pts[finite].max(axis=0)
        box = f"[{lo[0]:.6g},{lo[1]:.6g}]..[{hi[0]:.6g},{hi[1]:.6g}]"
    else:
        box = "n/a"
    debug.log(
        f"{name}: count={pts.shape[0]} finite_all={bool(finite.all())} bbox={box}"
    )
