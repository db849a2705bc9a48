import csv

import numpy as np

from src.run_sample import main, parse_anchors
from src.utils import debug


def _read_points(lines: list[str]) -> tuple[list[str], np.ndarray]:
    rows = list(csv.reader(lines))
    return rows[0], np.array([[float(x), float(y)] for x, y in rows[1:]])


def test_default_square_uniform_to_csv(tmp_path) -> None:
    out = tmp_path / "points.csv"
    assert main(["--output", str(out)]) is None
    with open(out, newline="", encoding="utf-8") as fh:
        header, points = _read_points(fh.read().splitlines())
    assert header == ["x", "y"]
    # precision 3 -> step 0.125, perimeter 8 -> 64 steps
    assert points.shape == (65, 2)
    assert np.allclose(points[0], [-1.0, -1.0])
    assert np.allclose(points[-1], [-1.0, -1.0])


def test_contour_mode_prints_to_stdout(capsys) -> None:
    main(["--mode", "contour", "--step", "1.0", "--offset", "1,1"])
    header, points = _read_points(capsys.readouterr().out.splitlines())
    assert header == ["x", "y"]
    # four sides of length 2 at step 1 -> 2 points each plus the closing point
    assert points.shape == (9, 2)
    assert np.allclose(points[0], [0.0, 0.0])
    assert np.allclose(points[-1], [0.0, 0.0])


def test_range_mode_on_open_curve(capsys) -> None:
    main(
        [
            "--anchors",
            "0,0 4,0",
            "--open",
            "--mode",
            "range",
            "--start",
            "0.25",
            "--end",
            "0.75",
            "--step_weight",
            "0.25",
        ]
    )
    _, points = _read_points(capsys.readouterr().out.splitlines())
    np.testing.assert_allclose(points[:, 0], [1.0, 2.0, 3.0], atol=1e-6)


def test_parse_anchors() -> None:
    anchors = parse_anchors("0,0 1,2.5")
    assert len(anchors) == 2
    assert np.allclose(anchors[1].position, [1.0, 2.5])
    assert len(parse_anchors(None)) == 4


def test_verbose_flag_prefixes_debug_lines(tmp_path, capsys) -> None:
    out = tmp_path / "points.csv"
    try:
        main(["-v", "--output", str(out)])
    finally:
        debug.set_verbose(False)
    logged = capsys.readouterr().out.splitlines()
    assert logged
    assert all(line.startswith("[beziertool] ") for line in logged)
