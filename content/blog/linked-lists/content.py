import html
import json
from collections import defaultdict
from pathlib import Path

from homepage.plot import Plot, Point, axes_labeled, grid, line_plot, log_scale, scales, tick, xticks, yticks

HERE = Path(__file__).parent

COLOR_UNSHUFFLED = "hsl(222 100% 75%)"
COLOR_SHUFFLED = "hsl(42 100% 75%)"


def process(jsonl: str) -> list:
    """
    Average the timings of each (bits, order, exponent) group into
    nanoseconds per element, one pair of plots per bit width.
    """
    groups = defaultdict(lambda: defaultdict(list))
    for line in jsonl.splitlines():
        if not line.strip():
            continue
        m = json.loads(line)
        groups[(m["bits"], m["order"])][m["exponent"]].append(m["seconds"])

    processed = []
    for bits in (32, 64):
        plots = []
        for order, color in (("shuffled", COLOR_SHUFFLED), ("unshuffled", COLOR_UNSHUFFLED)):
            points = []
            for exponent, timings in sorted(groups[(bits, order)].items()):
                n = 2 ** exponent
                mean = sum(timings) / len(timings)
                points.append(Point(n, mean / n * 1e9))
            plots.append(Plot(color, points))
        processed.append((bits, plots))
    return processed


def chart(plots) -> str:
    xtick_vals = [2 ** i for i in range(1, 31)]
    ytick_vals = [2 ** i for i in range(0, 8)]
    return axes_labeled(
        height=250,
        top=10,
        left=35,
        right=0,
        bottom=20,
        xlabel="number of elements",
        ylabel="time per element",
        content=[
            scales(
                x=log_scale(1, 2 ** 31),
                y=log_scale(0.5, 2 ** 7.5),
                content=[
                    yticks([tick(ns, f"{ns}ns") for ns in ytick_vals]),
                    grid(xtick_vals, ytick_vals),
                    *[line_plot(p) for p in plots],
                    xticks([tick(10 ** 3, "1K"), tick(10 ** 6, "1M"), tick(10 ** 9, "1B")]),
                ],
            )
        ],
    )


def two_charts(name: str, jsonl: str) -> str:
    button = f"{name}-bits"
    processed = process(jsonl)
    notes = "".join(
        f'<div class="{name}-{bits}bit"><p>Here are the <strong>{bits}-bit</strong> results.</p></div>'
        for bits, _ in processed
    )
    charts = "".join(f'<div class="{name}-{bits}bit">{chart(plots)}</div>' for bits, plots in processed)
    selector = (
        f'<div class="selectors"><div class="selector">'
        f'<input type="radio" id="{name}-32bit" name="{button}" checked>'
        f'<label for="{name}-32bit">32-bit</label>'
        f'<input type="radio" id="{name}-64bit" name="{button}">'
        f'<label for="{name}-64bit">64-bit</label>'
        f"</div></div>"
    )
    return f'<div class="charts"><div class="selection">{notes}</div>{selector}<div class="selection">{charts}</div></div>'


def content():
    desktop = (HERE / "desktop.jsonl").read_text(encoding="utf-8")
    return {
        "desktop": two_charts(html.escape("desktop"), desktop),
    }
