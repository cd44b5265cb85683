from pathlib import Path

import pytest

from homepage.config import load_config

CONFIG = """\
site_title: Test Site
author: Ada Example
site_tagline: Notes
site_url: {site_url}
posts:
  charts:
    title: Charts & things
    date: 2024-10-06
  older:
    title: Older post
    date: 2021-02-20
  draft:
    title: Work in progress
"""

PUBLICATIONS = """\
authors:
  ada: { name: Ada Example, href: / }
  bob: { name: Bob Coauthor, href: "https://bob.example/" }
publications:
  - title: A Paper
    href: https://doi.example/1
    venue: { name: CONF 2024, href: "https://conf.example/" }
    authors: [ada, bob]
"""

CHARTS_CONTENT = """\
from homepage.plot import svg


def content():
    return {"bar": svg(20, '<rect x="0" y="0" width="10" height="10"/>')}
"""


def write_site(root: Path, site_url: str = '""') -> Path:
    content = root / "content"
    (content / "blog" / "charts" / "assets").mkdir(parents=True)
    (content / "blog" / "older").mkdir(parents=True)
    (content / "blog" / "draft").mkdir(parents=True)

    for name in ("all.css", "blog.css", "index.css"):
        (content / name).write_text(f"/* {name} */\n", encoding="utf-8")
    (content / "index.md").write_text("Hello, *world*.\n", encoding="utf-8")

    charts = content / "blog" / "charts"
    (charts / "index.md").write_text("Intro.\n\n{{bar}}\n\nOutro.\n", encoding="utf-8")
    (charts / "content.py").write_text(CHARTS_CONTENT, encoding="utf-8")
    (charts / "style.css").write_text(".svg { color: red; }\n", encoding="utf-8")
    (charts / "assets" / "data.txt").write_text("1 2 3\n", encoding="utf-8")

    (content / "blog" / "older" / "index.md").write_text("![A cat](cat.png)\n", encoding="utf-8")
    (content / "blog" / "draft" / "index.md").write_text("Not yet.\n", encoding="utf-8")

    (root / "publications.yml").write_text(PUBLICATIONS, encoding="utf-8")
    config = root / "config.yml"
    config.write_text(CONFIG.format(site_url=site_url), encoding="utf-8")
    return config


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("SITE_URL", raising=False)
    return write_site(tmp_path)


@pytest.fixture
def cfg(config_path):
    return load_config(config_path)


@pytest.fixture
def cfg_with_url(tmp_path, monkeypatch):
    monkeypatch.delenv("SITE_URL", raising=False)
    return load_config(write_site(tmp_path, site_url="https://example.org/"))
