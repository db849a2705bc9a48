from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

import numpy as np


class AnchorKind(Enum):
    """Which tangent handles of an anchor are active ("pinched")."""

    POINT = "point"
    PREV_PINCH = "prev_pinch"
    NEXT_PINCH = "next_pinch"
    DOUBLE_PINCH = "double_pinch"

    @property
    def has_prev(self) -> bool:
        return self in (AnchorKind.PREV_PINCH, AnchorKind.DOUBLE_PINCH)

    @property
    def has_next(self) -> bool:
        return self in (AnchorKind.NEXT_PINCH, AnchorKind.DOUBLE_PINCH)

    @staticmethod
    def from_flags(has_prev: bool, has_next: bool) -> AnchorKind:
        if has_prev and has_next:
            return AnchorKind.DOUBLE_PINCH
        if has_prev:
            return AnchorKind.PREV_PINCH
        if has_next:
            return AnchorKind.NEXT_PINCH
        return AnchorKind.POINT


def as_vec2(value: Sequence[float] | np.ndarray) -> np.ndarray:
    v = np.asarray(value, dtype=np.float64)
    if v.shape != (2,):
        raise ValueError(f"expected a 2-vector, got shape {v.shape}")
    return v.copy()


def _zero() -> np.ndarray:
    return np.zeros(2, dtype=np.float64)


@dataclass(eq=False)
class Anchor:
    """
    A user-placed control point.

    Handles are stored as offsets from `position`; only the handles granted
    by `kind` take part in segment construction.
    """

    position: np.ndarray
    prev_handle: np.ndarray = field(default_factory=_zero)
    next_handle: np.ndarray = field(default_factory=_zero)
    kind: AnchorKind = AnchorKind.POINT

    def __post_init__(self) -> None:
        self.position = as_vec2(self.position)
        self.prev_handle = as_vec2(self.prev_handle)
        self.next_handle = as_vec2(self.next_handle)

    @property
    def prev_point(self) -> np.ndarray:
        return self.position + self.prev_handle

    @prev_point.setter
    def prev_point(self, point: np.ndarray) -> None:
        self.prev_handle = as_vec2(point) - self.position

    @property
    def next_point(self) -> np.ndarray:
        return self.position + self.next_handle

    @next_point.setter
    def next_point(self, point: np.ndarray) -> None:
        self.next_handle = as_vec2(point) - self.position

    def move(self, delta: Sequence[float] | np.ndarray) -> None:
        self.position = self.position + as_vec2(delta)

    def move_to(self, position: Sequence[float] | np.ndarray) -> None:
        self.position = as_vec2(position)

    def is_finite(self) -> bool:
        return bool(
            np.isfinite(self.position).all()
            and np.isfinite(self.prev_handle).all()
            and np.isfinite(self.next_handle).all()
        )

    def copy(self) -> Anchor:
        return Anchor(
            self.position.copy(),
            self.prev_handle.copy(),
            self.next_handle.copy(),
            self.kind,
        )


def default_anchors() -> list[Anchor]:
    # 2x2 square around the origin, the shape a freshly reset curve starts with.
    return [
        Anchor(np.array([-1.0, -1.0])),
        Anchor(np.array([-1.0, 1.0])),
        Anchor(np.array([1.0, 1.0])),
        Anchor(np.array([1.0, -1.0])),
    ]
