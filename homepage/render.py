import re

import markdown       # pip install markdown
from bs4 import BeautifulSoup  # pip install beautifulsoup4

# Matches placeholders like "{{histogramDie}}"
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")
IMG_TAG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)

MARKDOWN_EXTENSIONS = ["fenced_code", "codehilite", "tables"]
MARKDOWN_CONFIG = {
    "codehilite": {
        "guess_lang": False,
        "css_class": "highlight",
    },
}


class UnknownKeyError(LookupError):
    """A post references a placeholder its content module does not define."""


def render_markdown(text: str) -> str:
    # Raw HTML (e.g. inlined SVG charts) passes through untouched
    return markdown.markdown(
        text,
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_CONFIG,
        output_format="html",
    )


def substitute(text: str, replacements: dict, filename: str) -> str:
    """Replace every {{key}} in text; an unknown key is an authoring error."""

    def replace(match):
        key = match.group(1)
        if key not in replacements:
            raise UnknownKeyError(f"{filename} unknown key: {key}")
        return replacements[key]

    return PLACEHOLDER_RE.sub(replace, text)


def _figure(img_tag: str) -> str:
    soup = BeautifulSoup(img_tag, "html.parser")
    img = soup.find("img")
    alt = img.get("alt", "").strip()

    figure = soup.new_tag("figure")
    figure["class"] = "post-figure"
    img.replace_with(figure)
    figure.append(img)

    if alt:
        caption = soup.new_tag("figcaption")
        caption.string = alt
        figure.append(caption)

    return str(figure)


def wrap_images_with_figures(html_fragment: str) -> str:
    """
    Wrap <img> tags in <figure> with <figcaption> using the alt text.
    This exposes the Markdown alt text as a visible caption.

    Only the <img> tags are rewritten; everything around them (inline SVG
    charts in particular) is kept exactly as written.
    """

    def replace(match):
        before = html_fragment[:match.start()]
        # Skip if already inside a figure
        if before.count("<figure") > before.count("</figure>"):
            return match.group(0)
        return _figure(match.group(0))

    return IMG_TAG_RE.sub(replace, html_fragment)


def render_body(text: str, replacements: dict, filename: str) -> str:
    """Markdown source with placeholders -> HTML body."""
    return wrap_images_with_figures(render_markdown(substitute(text, replacements, filename)))
