from homepage.plot import element, num, svg

WIDTH = 350
PMAX = 0.3


def weights_to_probs(weights: dict) -> dict:
    total = sum(weights.values())
    return {i: w / total for i, w in weights.items()}


def histogram(probs: dict, pmax: float) -> str:
    """Bar chart of outcome -> probability; missing outcomes get no bar."""
    height = 200
    top = 10
    bottom = height - 20
    left = 45
    right = WIDTH

    def y_of(p):
        return (p / pmax) * top + (1 - p / pmax) * bottom

    start, end = min(probs), max(probs) + 1
    w = (right - left) / (end - start)

    parts = []
    for i, p in sorted(probs.items()):
        x = left + (i - start) * w
        margin = 5
        parts.append(
            element(
                "rect",
                {
                    "x": float(x + margin),
                    "y": float(y_of(p)),
                    "width": float(w - 2 * margin),
                    "height": float((p / pmax) * (bottom - top)),
                    "fill": "hsl(222 100% 75%)",
                },
            )
        )
        parts.append(
            element(
                "text",
                {
                    "x": float(x + w / 2),
                    "y": float(bottom + 5),
                    "fill": "white",
                    "text-anchor": "middle",
                    "dominant-baseline": "hanging",
                },
                str(i),
            )
        )
    for p in (0, pmax):
        parts.append(
            element(
                "text",
                {
                    "x": float(left - 5),
                    "y": float(y_of(p)),
                    "fill": "white",
                    "text-anchor": "end",
                    "dominant-baseline": "central",
                },
                f"{num(p * 100)}%",
            )
        )
    parts.append(
        element(
            "polyline",
            {
                "points": f"{left},{top} {left},{bottom} {WIDTH},{bottom}",
                "fill": "none",
                "stroke": "white",
                "stroke-width": "2",
            },
        )
    )
    return svg(height, "".join(parts), width=WIDTH)


def content():
    return {
        "histogramNaive": histogram(weights_to_probs({1: 2, 2: 2, 3: 1, 4: 1, 5: 1, 6: 1}), PMAX),
        "histogramEight": histogram(weights_to_probs({i: 1 for i in range(8)}), PMAX),
        "histogramDie": histogram(weights_to_probs({i: 1 for i in range(1, 7)}), PMAX),
    }
