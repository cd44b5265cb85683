"""
SVG chart helpers for blog posts.

Everything here returns markup strings. A chart is built from an ``axes``
call whose ``content`` is a list of callables; each one receives the
:class:`Dims` of the plotting area (or :class:`Scales`, once wrapped by
``scales``) and returns SVG markup.
"""
import html
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

WIDTH = 300
LABEL_SIZE = 20
TICK_SIZE = 5


def num(value: float) -> str:
    """Compact number formatting for SVG attributes."""
    value = round(value, 3)
    if value == 0:
        return "0"
    return format(value, "g")


def element(tag: str, attrs: dict, text: Optional[str] = None) -> str:
    parts = []
    for key, value in attrs.items():
        if isinstance(value, float):
            value = num(value)
        parts.append(f'{key}="{html.escape(str(value))}"')
    attr_html = " ".join(parts)
    if text is None:
        return f"<{tag} {attr_html}/>"
    return f"<{tag} {attr_html}>{html.escape(text)}</{tag}>"


def svg(height: float, children: str, width: float = WIDTH) -> str:
    return (
        f'<div class="svg"><svg viewBox="0 0 {num(width)} {num(height)}" '
        f'height="{num(height)}">{children}</svg></div>'
    )


@dataclass
class Dims:
    height: float  # total height of the graphic
    w: float       # width of the area subtended by the axes
    h: float       # height of the area subtended by the axes
    t: float       # free space above
    l: float       # free space to the left
    r: float       # free space to the right
    b: float       # free space below


AxesChild = Callable[[Dims], str]

# Maps a value to a number between zero and one for values in range.
Scale = Callable[[float], float]


@dataclass
class Scales(Dims):
    x: Scale = None
    y: Scale = None


ScalesChild = Callable[[Scales], str]


def axes(
    height: float,
    top: float,
    left: float,
    right: float,
    bottom: float,
    content: Sequence[AxesChild],
    width: float = WIDTH,
) -> str:
    dims = Dims(
        height=height,
        w=width - left - right,
        h=height - top - bottom,
        t=top,
        l=left,
        r=right,
        b=bottom,
    )
    children = "".join(f(dims) for f in content)
    frame = element(
        "polyline",
        {
            "points": (
                f"{num(left)},{num(top)} {num(left)},{num(height - bottom)} "
                f"{num(width - right)},{num(height - bottom)}"
            ),
            "fill": "none",
            "stroke": "white",
            "stroke-width": "2",
        },
    )
    return svg(height, children + frame, width=width)


def axes_labeled(
    height: float,
    top: float,
    left: float,
    right: float,
    bottom: float,
    xlabel: str,
    ylabel: str,
    content: Sequence[AxesChild],
    width: float = WIDTH,
) -> str:
    """Like ``axes``, with room on the left and bottom for axis labels."""

    def ylabel_text(dims: Dims) -> str:
        y = (dims.t + (dims.t + dims.h)) / 2
        return element(
            "text",
            {
                "x": "0",
                "y": float(y),
                "fill": "white",
                "text-anchor": "middle",
                "dominant-baseline": "hanging",
                "transform": f"rotate(-90 0 {num(y)})",
            },
            ylabel,
        )

    def xlabel_text(dims: Dims) -> str:
        return element(
            "text",
            {
                "x": float((dims.l + (dims.l + dims.w)) / 2),
                "y": float(dims.height - 5),
                "fill": "white",
                "text-anchor": "middle",
                "dominant-baseline": "text-bottom",
            },
            xlabel,
        )

    return axes(
        height=height,
        top=top,
        left=left + LABEL_SIZE,
        right=right,
        bottom=bottom + LABEL_SIZE,
        content=[ylabel_text, *content, xlabel_text],
        width=width,
    )


def scales(x: Scale, y: Scale, content: Sequence[ScalesChild]) -> AxesChild:
    def child(dims: Dims) -> str:
        info = Scales(**vars(dims), x=x, y=y)
        return "".join(f(info) for f in content)

    return child


def linear_scale(lo: float, hi: float) -> Scale:
    difference = hi - lo
    return lambda value: (value - lo) / difference


def log_scale(lo: float, hi: float) -> Scale:
    linear = linear_scale(math.log(lo), math.log(hi))
    return lambda value: linear(math.log(value))


@dataclass
class MajorTick:
    value: float
    text: str


def tick(value: float, text: str) -> MajorTick:
    return MajorTick(value, text)


def _x(s: Scales, value: float) -> float:
    return s.l + s.w * s.x(value)


def _y(s: Scales, value: float) -> float:
    return s.t + s.h - s.h * s.y(value)


def yticks(major: Sequence[MajorTick], minor: Sequence[float] = ()) -> ScalesChild:
    def child(s: Scales) -> str:
        parts = [
            element(
                "text",
                {
                    "x": float(s.l - TICK_SIZE),
                    "y": float(_y(s, m.value)),
                    "fill": "white",
                    "text-anchor": "end",
                    "dominant-baseline": "central",
                },
                m.text,
            )
            for m in major
        ]
        for value in minor:
            y0 = float(_y(s, value))
            parts.append(
                element(
                    "line",
                    {"x1": float(s.l), "y1": y0, "x2": float(s.l + TICK_SIZE), "y2": y0, "stroke": "grey"},
                )
            )
        return "".join(parts)

    return child


def xticks(major: Sequence[MajorTick], minor: Sequence[float] = ()) -> ScalesChild:
    def child(s: Scales) -> str:
        parts = []
        for value in minor:
            x0 = float(_x(s, value))
            parts.append(
                element(
                    "line",
                    {
                        "x1": x0,
                        "y1": float(s.t + s.h),
                        "x2": x0,
                        "y2": float(s.t + s.h - TICK_SIZE),
                        "stroke": "grey",
                    },
                )
            )
        for m in major:
            parts.append(
                element(
                    "text",
                    {
                        "x": float(_x(s, m.value)),
                        "y": float(s.t + s.h + TICK_SIZE),
                        "fill": "white",
                        "text-anchor": "middle",
                        "dominant-baseline": "hanging",
                    },
                    m.text,
                )
            )
        return "".join(parts)

    return child


def grid(xs: Sequence[float], ys: Sequence[float], color: str = "#444") -> ScalesChild:
    """Full-width and full-height guide lines at the given values."""

    def child(s: Scales) -> str:
        parts = []
        for value in xs:
            x0 = float(_x(s, value))
            parts.append(
                element("line", {"x1": x0, "y1": float(s.t), "x2": x0, "y2": float(s.t + s.h), "stroke": color})
            )
        for value in ys:
            y0 = float(_y(s, value))
            parts.append(
                element("line", {"x1": float(s.l), "y1": y0, "x2": float(s.l + s.w), "y2": y0, "stroke": color})
            )
        return "".join(parts)

    return child


@dataclass
class Point:
    x: float
    y: float


@dataclass
class Plot:
    color: str
    points: List[Point]


def line_plot(plot: Plot) -> ScalesChild:
    def child(s: Scales) -> str:
        points = " ".join(
            f"{num(_x(s, p.x))},{num(_y(s, p.y))}" for p in plot.points
        )
        return element(
            "polyline",
            {
                "points": points,
                "fill": "none",
                "stroke": plot.color,
                "stroke-width": "2",
                "stroke-linejoin": "round",
            },
        )

    return child
