import math

import pytest

from homepage.plot import (
    Plot,
    Point,
    axes,
    axes_labeled,
    element,
    line_plot,
    linear_scale,
    log_scale,
    num,
    scales,
    svg,
    tick,
    xticks,
    yticks,
)


def test_num():
    assert num(0.0) == "0"
    assert num(150.0) == "150"
    assert num(1 / 3) == "0.333"
    assert num(-0.0001) == "0"


def test_element_escapes():
    assert element("text", {"x": 1.5, "fill": "white"}, "a < b") == '<text x="1.5" fill="white">a &lt; b</text>'


def test_svg_wrapper():
    assert svg(200, "") == '<div class="svg"><svg viewBox="0 0 300 200" height="200"></svg></div>'


def test_scales():
    assert linear_scale(10, 20)(15) == 0.5
    assert log_scale(1, 100)(10) == pytest.approx(0.5)
    assert log_scale(1, 2 ** 31)(2 ** 31) == pytest.approx(1)


def test_axes_hand_dims_to_children():
    seen = []
    axes(height=100, top=10, left=20, right=5, bottom=15, content=[lambda d: seen.append(d) or ""])
    (dims,) = seen
    assert (dims.w, dims.h, dims.t, dims.l, dims.r, dims.b) == (275, 75, 10, 20, 5, 15)


def test_axes_labeled_makes_room_for_labels():
    seen = []
    out = axes_labeled(
        height=250, top=10, left=35, right=0, bottom=20,
        xlabel="n", ylabel="time",
        content=[lambda d: seen.append(d) or ""],
    )
    assert (seen[0].l, seen[0].b) == (55, 40)
    assert ">time</text>" in out and ">n</text>" in out
    # frame: left edge down to the bottom, then across
    assert 'points="55,10 55,210 300,210"' in out


def test_line_plot_maps_points_through_scales():
    child = scales(
        x=linear_scale(0, 10),
        y=linear_scale(0, 10),
        content=[line_plot(Plot("red", [Point(0, 0), Point(10, 10)]))],
    )
    out = axes(height=110, top=10, left=0, right=0, bottom=0, content=[child], width=100)
    assert 'points="0,110 100,10"' in out
    assert 'stroke="red"' in out


def test_ticks():
    child = scales(
        x=linear_scale(0, 1),
        y=linear_scale(0, 1),
        content=[
            xticks([tick(0.5, "half")], minor=[0.25]),
            yticks([tick(1, "top")], minor=[0.5]),
        ],
    )
    out = axes(height=100, top=0, left=0, right=0, bottom=0, content=[child], width=100)
    assert '<text x="50" y="105"' in out and ">half</text>" in out
    assert '<line x1="25" y1="100" x2="25" y2="95" stroke="grey"/>' in out
    assert '<text x="-5" y="0"' in out and ">top</text>" in out
    assert '<line x1="0" y1="50" x2="5" y2="50" stroke="grey"/>' in out


def test_log_ticks_land_inside_the_area():
    x = log_scale(1, 2 ** 31)
    assert 0 < x(10 ** 3) < x(10 ** 6) < x(10 ** 9) < 1
    assert not math.isnan(x(2))
