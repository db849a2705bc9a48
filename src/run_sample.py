from __future__ import annotations

import argparse
import csv
import sys
from typing import Protocol, Sequence, cast

import numpy as np

from .beziertool import step_length_for_precision
from .beziertool.anchor import Anchor, default_anchors
from .beziertool.contour import Contour
from .beziertool.curve import Curve
from .utils import debug, debug_helpers


class CliArgs(Protocol):
    anchors: str | None
    open: bool
    mode: str
    step: float | None
    precision: int
    start: float
    end: float
    step_weight: float
    length_steps: int
    offset: str
    output: str | None
    verbose: bool


def parse_xy(text: str) -> np.ndarray:
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"expected 'x,y', got {text!r}")
    return np.array([float(parts[0]), float(parts[1])], dtype=np.float64)


def parse_anchors(text: str | None) -> list[Anchor]:
    """Whitespace-separated 'x,y' positions; the editor's square when omitted."""
    if text is None:
        return default_anchors()
    return [Anchor(parse_xy(tok)) for tok in text.split()]


def write_points(points: np.ndarray, output: str | None) -> None:
    if output is None:
        writer = csv.writer(sys.stdout)
        writer.writerow(["x", "y"])
        writer.writerows((f"{x:.6f}", f"{y:.6f}") for x, y in points)
        return
    with open(output, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(["x", "y"])
        writer.writerows((f"{x:.6f}", f"{y:.6f}") for x, y in points)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Sample a piecewise Bezier curve and print the points as CSV"
    )
    ap.add_argument(
        "--anchors",
        default=None,
        help="Anchor positions as 'x,y x,y ...' (default: 2x2 square)",
    )
    ap.add_argument("--open", action="store_true", help="Treat the curve as open")
    ap.add_argument(
        "--mode",
        choices=("uniform", "contour", "range"),
        default="uniform",
        help="uniform: arc-length spacing; contour: per-segment; range: sub-arc",
    )
    ap.add_argument(
        "--step",
        type=float,
        default=None,
        help="Sampling distance (default: derived from --precision)",
    )
    ap.add_argument(
        "--precision",
        type=int,
        default=3,
        help="Precision level; step = 2**(precision-6)",
    )
    ap.add_argument("--start", type=float, default=0.0, help="Range start weight")
    ap.add_argument("--end", type=float, default=1.0, help="Range end weight")
    ap.add_argument(
        "--step_weight", type=float, default=0.05, help="Range step as weight"
    )
    ap.add_argument(
        "--length_steps",
        type=int,
        default=20,
        help="Subdivisions used to estimate each segment length",
    )
    ap.add_argument("--offset", default="0,0", help="Offset added to every point")
    ap.add_argument("--output", default=None, help="CSV path (default: stdout)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")
    return ap


def main(argv: Sequence[str] | None = None) -> None:
    args = cast(CliArgs, build_parser().parse_args(argv))
    debug.set_verbose(args.verbose)

    if args.length_steps < 1:
        raise ValueError("length_steps must be >= 1")
    step = args.step if args.step is not None else step_length_for_precision(
        args.precision
    )
    if step <= 0:
        raise ValueError("step must be positive")

    anchors = parse_anchors(args.anchors)
    offset = parse_xy(args.offset)
    closed = not args.open
    debug.log(f"anchors={len(anchors)} closed={closed} mode={args.mode} step={step:.6g}")

    if args.mode == "contour":
        points = Contour(anchors, closed, args.length_steps).sample_points(step, offset)
    else:
        curve = Curve(anchors, closed, args.length_steps)
        if args.mode == "range":
            points = curve.range_samples(
                args.start, args.end, args.step_weight, offset
            )
        else:
            points = curve.uniform_samples(step, offset)
    debug_helpers.log_points("points", points)

    write_points(points, args.output)


if __name__ == "__main__":
    main()
