from . import anchor, contour, curve, handles, insertion, line, range_table, spline
from .anchor import Anchor, AnchorKind, default_anchors
from .contour import Contour
from .curve import Curve
from .insertion import add_point, find_nearest_segment, insert_anchor
from .range_table import RangeEntry, RangeTable
from .spline import Cubic, Line, Quadratic, build_spline

DEFAULT_CURVE_PRECISION = 3


def step_length_for_precision(precision: int = DEFAULT_CURVE_PRECISION) -> float:
    """Sampling distance used by the editor for a given precision level."""
    return 2.0 ** (precision - 6)


__all__ = [
    "anchor",
    "spline",
    "range_table",
    "curve",
    "contour",
    "line",
    "insertion",
    "handles",
    "Anchor",
    "AnchorKind",
    "default_anchors",
    "Line",
    "Quadratic",
    "Cubic",
    "build_spline",
    "RangeEntry",
    "RangeTable",
    "Curve",
    "Contour",
    "find_nearest_segment",
    "insert_anchor",
    "add_point",
    "DEFAULT_CURVE_PRECISION",
    "step_length_for_precision",
]
