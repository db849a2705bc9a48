import numpy as np
import pytest

from src.beziertool.anchor import Anchor, AnchorKind
from src.beziertool.spline import (
    Cubic,
    Line,
    Quadratic,
    build_spline,
    estimate_length,
    evaluate,
    evaluate_many,
    round_count,
    sample_points,
)


def _v(x: float, y: float) -> np.ndarray:
    return np.array([x, y], dtype=np.float64)


SPLINES = [
    Line(_v(0.0, 0.0), _v(3.0, 4.0)),
    Quadratic(_v(0.0, 0.0), _v(2.0, 0.0), _v(1.0, 2.0)),
    Cubic(_v(0.0, 0.0), _v(1.0, 0.0), _v(0.0, 1.0), _v(1.0, 1.0)),
]


@pytest.mark.parametrize("sp", SPLINES)
def test_evaluate_reproduces_endpoints(sp) -> None:
    assert np.allclose(evaluate(sp, 0.0), sp.a)
    assert np.allclose(evaluate(sp, 1.0), sp.b)


def test_quadratic_midpoint() -> None:
    sp = Quadratic(_v(0.0, 0.0), _v(2.0, 0.0), _v(1.0, 2.0))
    assert np.allclose(evaluate(sp, 0.5), [1.0, 1.0])


def test_cubic_midpoint() -> None:
    sp = Cubic(_v(0.0, 0.0), _v(1.0, 0.0), _v(0.0, 1.0), _v(1.0, 1.0))
    assert np.allclose(evaluate(sp, 0.5), [0.5, 0.75])


def test_line_extrapolates_outside_unit_interval() -> None:
    sp = Line(_v(0.0, 0.0), _v(1.0, 0.0))
    assert np.allclose(evaluate(sp, 2.0), [2.0, 0.0])
    assert np.allclose(evaluate(sp, -0.5), [-0.5, 0.0])


@pytest.mark.parametrize("sp", SPLINES)
def test_evaluate_many_matches_scalar(sp) -> None:
    ts = np.linspace(0.0, 1.0, 7)
    pts = evaluate_many(sp, ts)
    assert pts.shape == (7, 2)
    for t, p in zip(ts, pts):
        assert np.allclose(p, evaluate(sp, float(t)))


def test_line_length_is_exact() -> None:
    sp = Line(_v(0.0, 0.0), _v(3.0, 4.0))
    assert np.isclose(estimate_length(sp, 1), 5.0)
    assert np.isclose(estimate_length(sp), 5.0)


def test_length_non_decreasing_and_converges() -> None:
    sp = Cubic(_v(0.0, 0.0), _v(4.0, 0.0), _v(0.0, 3.0), _v(4.0, 3.0))
    lengths = [estimate_length(sp, s) for s in (1, 2, 4, 8, 16, 32, 64, 128)]
    assert all(L >= 0.0 for L in lengths)
    for lo, hi in zip(lengths, lengths[1:]):
        assert hi >= lo - 1e-12
    assert abs(lengths[-1] - lengths[-2]) < 1e-3


def test_zero_length_segment_is_constant() -> None:
    p = _v(1.0, 2.0)
    sp = Line(p, p.copy())
    assert estimate_length(sp) == 0.0
    assert np.allclose(evaluate(sp, 0.3), p)


def test_estimate_length_rejects_zero_steps() -> None:
    with pytest.raises(ValueError):
        estimate_length(Line(_v(0.0, 0.0), _v(1.0, 0.0)), 0)


def test_sample_points_count_from_length() -> None:
    sp = Line(_v(0.0, 0.0), _v(1.0, 0.0))
    pts = sample_points(sp, 0.25)
    assert pts.shape == (5, 2)
    np.testing.assert_allclose(pts[:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])


def test_sample_points_at_least_one_edge() -> None:
    sp = Line(_v(0.0, 0.0), _v(1.0, 0.0))
    pts = sample_points(sp, 10.0)
    assert pts.shape == (2, 2)
    assert np.allclose(pts[-1], [1.0, 0.0])


def test_round_count_rounds_half_up() -> None:
    assert round_count(2.5) == 3
    assert round_count(3.5) == 4
    assert round_count(2.49) == 2
    assert round_count(0.0) == 0


@pytest.mark.parametrize(
    ("kind_a", "kind_b", "expected"),
    [
        (AnchorKind.POINT, AnchorKind.POINT, Line),
        (AnchorKind.NEXT_PINCH, AnchorKind.POINT, Quadratic),
        (AnchorKind.POINT, AnchorKind.PREV_PINCH, Quadratic),
        (AnchorKind.DOUBLE_PINCH, AnchorKind.DOUBLE_PINCH, Cubic),
        (AnchorKind.PREV_PINCH, AnchorKind.NEXT_PINCH, Line),
    ],
)
def test_build_spline_decision_table(kind_a, kind_b, expected) -> None:
    a = Anchor(_v(0.0, 0.0), next_handle=_v(1.0, 0.0), kind=kind_a)
    b = Anchor(_v(4.0, 0.0), prev_handle=_v(-1.0, 1.0), kind=kind_b)
    sp = build_spline(a, b)
    assert type(sp) is expected
    assert np.allclose(sp.a, [0.0, 0.0])
    assert np.allclose(sp.b, [4.0, 0.0])


def test_build_spline_control_points_are_absolute() -> None:
    a = Anchor(_v(0.0, 0.0), next_handle=_v(1.0, 0.0), kind=AnchorKind.NEXT_PINCH)
    b = Anchor(_v(4.0, 0.0), prev_handle=_v(-1.0, 1.0), kind=AnchorKind.PREV_PINCH)
    sp = build_spline(a, b)
    assert isinstance(sp, Cubic)
    assert np.allclose(sp.c, [1.0, 0.0])
    assert np.allclose(sp.d, [3.0, 1.0])

    only_in = build_spline(Anchor(_v(0.0, 0.0)), b)
    assert isinstance(only_in, Quadratic)
    assert np.allclose(only_in.c, [3.0, 1.0])


def test_spline_does_not_alias_anchor_arrays() -> None:
    a = Anchor(_v(0.0, 0.0))
    b = Anchor(_v(1.0, 0.0))
    sp = build_spline(a, b)
    a.position[0] = 5.0
    assert np.allclose(sp.a, [0.0, 0.0])


@pytest.mark.parametrize("sp", SPLINES)
def test_evaluate_accepts_integer_parameter(sp) -> None:
    assert np.allclose(evaluate(sp, 0), sp.a)
    assert np.allclose(evaluate(sp, 1), sp.b)
