import html
from pathlib import Path

import yaml           # pip install pyyaml


def load_publications(path: Path) -> list:
    """
    Load publications.yml and resolve author keys:

      authors:
        sam: { name: Sam Estep, href: / }
      publications:
        - title: ...
          href: ...
          venue: { name: ECOOP 2024, href: ... }
          authors: [sam]
          preprint: true

    Returns a list of dicts with "authors" replaced by {name, href} dicts.
    """
    if not path.exists():
        return []
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    people = data.get("authors") or {}

    pubs = []
    for pub in data.get("publications") or []:
        authors = []
        for key in pub.get("authors") or []:
            if key not in people:
                raise KeyError(f"{path} unknown author: {key}")
            authors.append(people[key])
        pubs.append(
            {
                "title": pub["title"],
                "href": pub["href"],
                "venue": pub["venue"],
                "authors": authors,
                "preprint": bool(pub.get("preprint", False)),
            }
        )
    return pubs


def _link(href: str, text: str) -> str:
    return f'<a href="{html.escape(href)}">{html.escape(text)}</a>'


def render_authors(authors: list) -> str:
    """Join author links as "A", "A and B" or "A, B, and C"."""
    links = [_link(a["href"], a["name"]) for a in authors]
    if not links:
        raise ValueError("no authors")
    if len(links) == 1:
        return links[0]
    if len(links) == 2:
        return f"{links[0]} and {links[1]}"
    return "".join(f"{link}, " for link in links[:-1]) + f"and {links[-1]}"


def render_publications(pubs: list) -> str:
    items = []
    for pub in pubs:
        if pub["preprint"]:
            title = html.escape(pub["title"])
            note = f' ({_link(pub["href"], "pre-print")}; accepted, pending publication)'
        else:
            title = _link(pub["href"], pub["title"])
            note = ""
        venue = pub["venue"]
        items.append(
            f'<li>{title}, <span class="venue">in {_link(venue["href"], venue["name"])}</span>'
            f", by {render_authors(pub['authors'])}{note}.</li>"
        )
    return "<ul>\n" + "\n".join(items) + "\n</ul>"
