# MIT License
"""Geometry helpers for drawing flow connectors.

Two pure functions live here: the exit point of a ray on a node's
rectangular outline, and the control points of the horizontally biased
cubic Bézier used for every connector.  Coordinates are absolute pixels
with the y axis pointing down, as on a screen.
"""
from __future__ import annotations
import math
from typing import NamedTuple


class Point(NamedTuple):
    x: float
    y: float


class CubicBezier(NamedTuple):
    start: Point
    control1: Point
    control2: Point
    end: Point

    def point_at(self, t: float) -> Point:
        """Evaluate the curve at parameter ``t`` in ``[0, 1]``."""
        u = 1.0 - t
        a, b, c, d = u ** 3, 3 * u * u * t, 3 * u * t * t, t ** 3
        return Point(
            a * self.start.x + b * self.control1.x + c * self.control2.x + d * self.end.x,
            a * self.start.y + b * self.control1.y + c * self.control2.y + d * self.end.y,
        )

    def to_svg(self) -> str:
        """Serialise as an SVG path ``d`` attribute."""
        s, c1, c2, e = self.start, self.control1, self.control2, self.end
        return (
            f"M {_fmt(s.x)} {_fmt(s.y)} "
            f"C {_fmt(c1.x)} {_fmt(c1.y)}, {_fmt(c2.x)} {_fmt(c2.y)}, {_fmt(e.x)} {_fmt(e.y)}"
        )


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def perimeter_intersection(center_a: Point, center_b: Point, width: float, height: float) -> Point:
    """Point where the ray from ``center_a`` towards ``center_b`` leaves a box.

    The box is ``width × height`` and centred on ``center_a``.  The ray
    direction ``θ = atan2(Δy, Δx)`` exits through a left/right edge when
    ``|cos θ|·h/2 > |sin θ|·w/2`` and through the top/bottom edge
    otherwise.

    Parameters
    ----------
    center_a:
        Centre of the rectangle the ray starts in.
    center_b:
        Any point along the desired direction (usually the other node's
        centre).
    width, height:
        Rectangle size in pixels.

    Returns
    -------
    Point
        The exit point.  When both centres coincide the direction is
        undefined and ``center_a`` is returned unchanged.
    """
    dx = center_b[0] - center_a[0]
    dy = center_b[1] - center_a[1]
    if dx == 0 and dy == 0:
        return Point(center_a[0], center_a[1])
    half_w = width / 2.0
    half_h = height / 2.0
    theta = math.atan2(dy, dx)
    if dy == 0 or abs(math.cos(theta)) * half_h > abs(math.sin(theta)) * half_w:
        # left or right edge
        return Point(center_a[0] + math.copysign(half_w, dx), center_a[1] + dy * half_w / abs(dx))
    # top or bottom edge
    return Point(center_a[0] + dx * half_h / abs(dy), center_a[1] + math.copysign(half_h, dy))


def bezier_path(start: Point, end: Point, curvature: float = 0.3) -> CubicBezier:
    """Build the flow curve between two anchor points.

    Control points are pushed horizontally by ``curvature × Δx`` from
    each endpoint and keep that endpoint's y coordinate, which gives the
    left-to-right "flow" look.  Because the arrangement is symmetric the
    curve's midpoint coincides with the midpoint of the chord.
    """
    dx = end[0] - start[0]
    return CubicBezier(
        Point(start[0], start[1]),
        Point(start[0] + dx * curvature, start[1]),
        Point(end[0] - dx * curvature, end[1]),
        Point(end[0], end[1]),
    )


def midpoint(a: Point, b: Point) -> Point:
    return Point((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)
