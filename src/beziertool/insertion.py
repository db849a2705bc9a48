from __future__ import annotations

from typing import Iterable

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from ..utils import debug
from .anchor import Anchor, AnchorKind, as_vec2
from .curve import Curve
from .line import line_intersection, normalized, point_edges_dist2
from .spline import evaluate, sample_points
from .types import Vec2

# Empirical constants of the editor, tunable; no derivation exists.
COLLINEAR_DOT_LIMIT = 0.8
FALLBACK_HANDLE_FRACTION = 0.25
SUBDIVIDE_BRACKET = (0.48, 0.5, 0.52)

EXACT_HIT_DIST2 = 1e-12
DEFAULT_SAMPLE_STEP = 0.1


def is_suitable_for_intersection(
    a0: np.ndarray, a1: np.ndarray, b0: np.ndarray, b1: np.ndarray
) -> bool:
    """True when the two directions are far enough from (anti)parallel."""
    dot = float(np.dot(normalized(a0 - a1), normalized(b0 - b1)))
    return abs(dot) < COLLINEAR_DOT_LIMIT


@jaxtyped(typechecker=beartype)
def find_nearest_segment(
    curve: Curve,
    point: Vec2,
    sample_step: float = DEFAULT_SAMPLE_STEP,
) -> tuple[int, Vec2, Vec2]:
    """
    Segment whose sampled polyline passes closest to `point`, together with
    the nearest polyline edge (bracket). Stops early on an exact hit.
    """
    best = -1
    best_d2 = float("inf")
    bracket_start = np.zeros(2, dtype=np.float64)
    bracket_end = np.zeros(2, dtype=np.float64)
    for i, sp in enumerate(curve.splines):
        pts = sample_points(sp, sample_step)
        d2 = point_edges_dist2(point, pts[:-1], pts[1:])
        j = int(np.argmin(d2))
        if float(d2[j]) < best_d2:
            best = i
            best_d2 = float(d2[j])
            bracket_start = pts[j].copy()
            bracket_end = pts[j + 1].copy()
            if best_d2 <= EXACT_HIT_DIST2:
                break
    return best, bracket_start, bracket_end


def _fit_handle(
    neighbor_pos: np.ndarray,
    handle: np.ndarray,
    position: np.ndarray,
    bracket_from: np.ndarray,
    bracket_to: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, bool]:
    """
    New (neighbor handle offset, absolute handle point for the inserted anchor,
    used_intersection) for one side of the insertion.
    """
    handle_point = neighbor_pos + handle
    aux = None
    if is_suitable_for_intersection(neighbor_pos, handle_point, bracket_from, bracket_to):
        aux = line_intersection(neighbor_pos, handle_point, bracket_from, bracket_to)
    if aux is not None:
        return 0.5 * (aux - neighbor_pos), 0.5 * (aux + position), True

    direction = normalized(bracket_from - bracket_to)
    distance = float(np.linalg.norm(neighbor_pos - position))
    k = FALLBACK_HANDLE_FRACTION
    if float(np.dot(handle, direction)) > 0.0:
        new_point = position - k * distance * direction
    else:
        new_point = position + k * distance * direction
    return normalized(handle) * k, new_point, False


@jaxtyped(typechecker=beartype)
def insert_anchor(
    anchors: list[Anchor],
    segment_index: int,
    new_position: Vec2,
    bracket_start: Vec2,
    bracket_end: Vec2,
) -> Anchor:
    """
    Split segment `segment_index` at `new_position`.

    The bracket is the sampled edge around the hit point and stands in for the
    local tangent. Active neighbour handles are shortened and the new anchor
    receives matching handles so the curve keeps roughly its shape. The new
    anchor is spliced in after the segment's first anchor and returned.
    """
    n = len(anchors)
    if n < 2:
        raise ValueError("insertion needs at least 2 anchors")
    if not -n <= segment_index < n:
        raise ValueError(f"segment index {segment_index} out of range for {n} anchors")
    i = (segment_index + n) % n
    j = (segment_index + 1) % n
    left = anchors[i]
    right = anchors[j]
    position = as_vec2(new_position)

    prev_point = position.copy()
    has_prev = left.kind.has_next
    if has_prev:
        # bracket runs start->end, i.e. toward the right neighbour
        left.next_handle, prev_point, hit = _fit_handle(
            left.position, left.next_handle, position, bracket_start, bracket_end
        )
        if not hit:
            debug.log(f"insert: left handle of anchor {i} uses collinear fallback")

    next_point = position.copy()
    has_next = right.kind.has_prev
    if has_next:
        right.prev_handle, next_point, hit = _fit_handle(
            right.position, right.prev_handle, position, bracket_end, bracket_start
        )
        if not hit:
            debug.log(f"insert: right handle of anchor {j} uses collinear fallback")

    anchor = Anchor(
        position,
        prev_point - position,
        next_point - position,
        AnchorKind.from_flags(has_prev, has_next),
    )
    anchors.insert(i + 1, anchor)
    return anchor


def add_point(
    anchors: list[Anchor],
    point: np.ndarray,
    closed: bool,
    step_length: float = DEFAULT_SAMPLE_STEP,
) -> Anchor:
    """Insert an anchor at `point` on whichever segment passes closest to it."""
    p = as_vec2(point)
    curve = Curve(anchors, closed)
    index, start, end = find_nearest_segment(curve, p, step_length)
    return insert_anchor(anchors, index, p, start, end)


def subdivide_segments(
    anchors: list[Anchor],
    segment_indices: Iterable[int],
    closed: bool,
) -> list[Anchor]:
    """
    Insert an anchor at the parametric middle of each listed segment.
    Returned anchors follow curve order.
    """
    curve = Curve(anchors, closed)
    m = curve.segment_count
    indices = sorted({int(s) for s in segment_indices})
    for s in indices:
        if not 0 <= s < m:
            raise ValueError(f"segment index {s} out of range for {m} segments")
    lo, mid, hi = SUBDIVIDE_BRACKET
    added: list[Anchor] = []
    # descending, so pending indices stay valid after each splice
    for s in reversed(indices):
        sp = curve.splines[s]
        added.append(
            insert_anchor(
                anchors, s, evaluate(sp, mid), evaluate(sp, lo), evaluate(sp, hi)
            )
        )
    added.reverse()
    return added


def segments_between(n: int, indices: Iterable[int], closed: bool) -> list[int]:
    """Segments whose two end anchors are both listed."""
    chosen = {int(k) % n for k in indices}
    last = n if closed else n - 1
    return [s for s in range(last) if s in chosen and (s + 1) % n in chosen]


def subdivide_between(
    anchors: list[Anchor],
    indices: Iterable[int],
    closed: bool,
) -> list[Anchor]:
    segments = segments_between(len(anchors), indices, closed)
    if not segments:
        return []
    return subdivide_segments(anchors, segments, closed)


def remove_anchors(anchors: list[Anchor], indices: Iterable[int]) -> bool:
    n = len(anchors)
    doomed = sorted({(int(k) + n) % n for k in indices if -n <= int(k) < n})
    for k in reversed(doomed):
        del anchors[k]
    return bool(doomed)
