from __future__ import annotations

from typing import Iterable

from .anchor import Anchor, AnchorKind
from .curve import build_splines
from .insertion import segments_between
from .spline import evaluate

# Parameters on the adjoining segment where generated handles are placed.
NEXT_HANDLE_T = 0.2
PREV_HANDLE_T = 0.8


def _chosen(n: int, indices: Iterable[int]) -> set[int]:
    return {int(k) % n for k in indices}


def add_handles(anchors: list[Anchor], indices: Iterable[int], closed: bool) -> bool:
    """
    Give every listed anchor both handles, taken from the current shape of
    the adjoining segments. Ends of an open curve only get the inner handle.
    Returns True if any handle was created.
    """
    n = len(anchors)
    splines = build_splines(anchors, closed)
    changed = False
    for i in sorted(_chosen(n, indices)):
        anchor = anchors[i]
        has_prev = closed or i > 0
        has_next = closed or i < n - 1
        if has_prev and not anchor.kind.has_prev:
            anchor.prev_point = evaluate(splines[(i - 1 + n) % n], PREV_HANDLE_T)
            changed = True
        if has_next and not anchor.kind.has_next:
            anchor.next_point = evaluate(splines[i], NEXT_HANDLE_T)
            changed = True
        anchor.kind = AnchorKind.from_flags(has_prev, has_next)
    return changed


def remove_handles(anchors: list[Anchor], indices: Iterable[int]) -> bool:
    n = len(anchors)
    chosen = _chosen(n, indices)
    for i in chosen:
        anchors[i].kind = AnchorKind.POINT
    return bool(chosen)


def add_handles_between(
    anchors: list[Anchor], indices: Iterable[int], closed: bool
) -> bool:
    """Activate the two facing handles on each segment joining listed anchors."""
    n = len(anchors)
    splines = build_splines(anchors, closed)
    changed = False
    for s in segments_between(n, indices, closed):
        first = anchors[s]
        second = anchors[(s + 1) % n]
        sp = splines[s]
        if not second.kind.has_prev:
            second.prev_point = evaluate(sp, PREV_HANDLE_T)
            second.kind = AnchorKind.from_flags(True, second.kind.has_next)
            changed = True
        if not first.kind.has_next:
            first.next_point = evaluate(sp, NEXT_HANDLE_T)
            first.kind = AnchorKind.from_flags(first.kind.has_prev, True)
            changed = True
    return changed


def remove_handles_between(
    anchors: list[Anchor], indices: Iterable[int], closed: bool
) -> bool:
    """Straighten each segment joining listed anchors; outer handles stay."""
    n = len(anchors)
    segments = segments_between(n, indices, closed)
    for s in segments:
        first = anchors[s]
        second = anchors[(s + 1) % n]
        first.kind = AnchorKind.from_flags(first.kind.has_prev, False)
        second.kind = AnchorKind.from_flags(False, second.kind.has_next)
    return bool(segments)
