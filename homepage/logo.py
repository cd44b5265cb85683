"""
The site logo, as SVG for the published site and as a PNG favicon.

The geometry is kept as lists of path commands so the same shapes can be
written out as SVG path data and rasterized with Pillow.
"""
import colorsys
import io
import math

from PIL import Image, ImageDraw

from homepage.plot import num

S = 100
HUES = [(0, 0), (20, 33), (40, 66), (60, 111), (80, 222), (100, 333)]  # (offset %, hue)
SUPERSAMPLE = 4


def _geometry():
    """Return (gradient id, commands) for each of the four logo paths."""
    r2 = 32
    r1 = (S - 2 * r2) * math.sqrt(2) - r2
    r1d = r1 / math.sqrt(2)
    # z solves 2z^2 - 2Sz + (S - r2)^2 = 0, the smaller root
    a, b, c = 2, -2 * S, (S - r2) ** 2
    z = (-b - math.sqrt(b ** 2 - 4 * a * c)) / (2 * a)

    first = [
        ("M", S, r2),
        ("A", r2, 1, 0, r2 + r1d, S - r2 - r1d),
        ("A", r1, 1, 1, r2 - r1, S - r2),
        ("L", 0, S - r2),
        ("A", r2, 1, 0, S - r2 - r1d, r2 + r1d),
        ("A", r1, 1, 1, S - r2 + r1, r2),
        ("Z",),
    ]
    last = [
        ("M", S, r2),
        ("A", r2, 1, 0, z, z),
        ("A", r2, 1, 0, r2, S),
        ("L", r2, S - r2 + r1),
        ("A", r1, 1, 1, r2 + r1d, S - r2 - r1d),
        ("L", S - r2 - r1d, r2 + r1d),
        ("A", r1, 1, 1, S - r2 + r1, r2),
        ("Z",),
    ]
    both1 = [
        ("M", S, r2),
        ("A", r2, 1, 0, r2 + r1d, S - r2 - r1d),
        ("L", S - r2 - r1d, r2 + r1d),
        ("A", r1, 1, 1, S - r2 + r1, r2),
        ("Z",),
    ]
    both2 = [
        ("M", r2, S - r2 + r1),
        ("A", r1, 0, 1, r2 - r1, S - r2),
        ("L", 0, S - r2),
        ("A", r2, 0, 0, r2, S),
        ("Z",),
    ]
    return [("one", first), ("one", last), ("both", both1), ("both", both2)]


def path_data(commands) -> str:
    """Serialize commands; arcs are circular (``A r large sweep x y``)."""
    parts = []
    for cmd in commands:
        op = cmd[0]
        if op in ("M", "L"):
            parts.append(f"{op} {num(cmd[1])} {num(cmd[2])}")
        elif op == "A":
            r, large, sweep, x, y = cmd[1:]
            parts.append(f"A {num(r)} {num(r)} 0 {large} {sweep} {num(x)} {num(y)}")
        else:
            parts.append("Z")
    return " ".join(parts)


def _gradient_svg(gradient_id: str, lightness: int) -> str:
    stops = "".join(
        f'<stop offset="{offset}%" stop-color="hsl({hue} 100% {lightness}%)"/>'
        for offset, hue in HUES
    )
    return (
        f'<linearGradient id="{gradient_id}" gradientUnits="userSpaceOnUse" '
        f'x1="0" x2="{S}" y1="{S}" y2="0">{stops}</linearGradient>'
    )


def logo_svg() -> str:
    paths = "".join(
        f'<path d="{path_data(commands)}" fill="url(#{gradient_id})"/>'
        for gradient_id, commands in _geometry()
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" viewBox="0 0 {S} {S}">'
        f"<defs>{_gradient_svg('one', 90)}{_gradient_svg('both', 75)}</defs>"
        f"{paths}</svg>\n"
    )


# -----------------------
# Rasterizing
# -----------------------

def arc_points(x1, y1, r, large, sweep, x2, y2, steps=48):
    """
    Flatten a circular SVG arc from (x1, y1) to (x2, y2) into points,
    excluding the start point. Uses the endpoint-to-center conversion from
    the SVG implementation notes, with the radius scaled up if it is too
    small to reach the endpoint.
    """
    dx, dy = (x1 - x2) / 2, (y1 - y2) / 2
    d2 = dx * dx + dy * dy
    if d2 == 0:
        return []
    r = max(r, math.sqrt(d2))
    coef = math.sqrt(max(0.0, (r * r - d2) / d2))
    if large == sweep:
        coef = -coef
    cx = coef * dy + (x1 + x2) / 2
    cy = -coef * dx + (y1 + y2) / 2

    t1 = math.atan2(y1 - cy, x1 - cx)
    dt = math.atan2(y2 - cy, x2 - cx) - t1
    if sweep and dt < 0:
        dt += 2 * math.pi
    elif not sweep and dt > 0:
        dt -= 2 * math.pi

    return [
        (cx + r * math.cos(t1 + dt * i / steps), cy + r * math.sin(t1 + dt * i / steps))
        for i in range(1, steps + 1)
    ]


def polygon(commands):
    points = []
    for cmd in commands:
        op = cmd[0]
        if op in ("M", "L"):
            points.append((cmd[1], cmd[2]))
        elif op == "A":
            x1, y1 = points[-1]
            points.extend(arc_points(x1, y1, *cmd[1:]))
    return points


def _stop_color(hue: int, lightness: int):
    r, g, b = colorsys.hls_to_rgb(hue / 360, lightness / 100, 1.0)
    return (r * 255, g * 255, b * 255)


def _gradient_image(size: int, lightness: int) -> Image.Image:
    # gradient runs from the bottom-left corner to the top-right corner
    stops = [(offset / 100, _stop_color(hue, lightness)) for offset, hue in HUES]
    # color only depends on px - py, so each row is a window into one strip
    strip = Image.new("RGBA", (2 * size, 1))
    strip.putdata([_interpolate(stops, k / (2 * size)) for k in range(2 * size)])
    image = Image.new("RGBA", (size, size))
    for py in range(size):
        image.paste(strip.crop((size - py, 0, 2 * size - py, 1)), (0, py))
    return image


def _interpolate(stops, t):
    if t <= stops[0][0]:
        color = stops[0][1]
    elif t >= stops[-1][0]:
        color = stops[-1][1]
    else:
        for (o0, c0), (o1, c1) in zip(stops, stops[1:]):
            if o0 <= t <= o1:
                u = (t - o0) / (o1 - o0)
                color = tuple(a + (b - a) * u for a, b in zip(c0, c1))
                break
    return tuple(int(round(c)) for c in color) + (255,)


def logo_image(size: int = 256) -> Image.Image:
    big = size * SUPERSAMPLE
    scale = big / S
    gradients = {"one": _gradient_image(big, 90), "both": _gradient_image(big, 75)}
    image = Image.new("RGBA", (big, big), (0, 0, 0, 0))
    for gradient_id, commands in _geometry():
        mask = Image.new("L", (big, big), 0)
        points = [(x * scale, y * scale) for x, y in polygon(commands)]
        ImageDraw.Draw(mask).polygon(points, fill=255)
        image.paste(gradients[gradient_id], (0, 0), mask)
    return image.resize((size, size), Image.LANCZOS)


def logo_png(size: int = 256) -> bytes:
    buf = io.BytesIO()
    logo_image(size).save(buf, format="PNG")
    return buf.getvalue()


def logo_jpeg(size: int = 200, background=(255, 255, 255)) -> bytes:
    """The logo flattened onto a solid background; JPEG has no alpha."""
    image = logo_image(size)
    flat = Image.new("RGB", image.size, background)
    flat.paste(image, (0, 0), image)
    buf = io.BytesIO()
    flat.save(buf, format="JPEG", quality=90)
    return buf.getvalue()
