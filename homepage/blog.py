"""
Blog posts: metadata from the config, markdown from content/blog/<name>/index.md,
and chart fragments from an optional content/blog/<name>/content.py.

A content module defines ``content()`` returning a mapping of placeholder
name to HTML; ``index.md`` refers to them as ``{{name}}``.
"""
import importlib.util
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from homepage.render import render_body

POST_SOURCE = "index.md"
CONTENT_MODULE = "content.py"
POST_STYLE = "style.css"


@dataclass
class Post:
    name: str
    title: str
    date: Optional[str]

    @property
    def published(self) -> bool:
        return self.date is not None


def post_dir(cfg: dict, name: str) -> Path:
    return cfg["content_dir"] / "blog" / name


def get_post(cfg: dict, name: str) -> Post:
    meta = cfg["posts"].get(name)
    if meta is None:
        raise LookupError(f"unknown blog post: {name}")
    return Post(name=name, title=meta["title"], date=meta["date"])


def list_posts(cfg: dict, include_drafts: bool = False) -> List[Post]:
    """Posts newest first; undated (unpublished) posts only if asked for."""
    posts = [get_post(cfg, name) for name in cfg["posts"]]
    if not include_drafts:
        posts = [p for p in posts if p.published]
    return sorted(posts, key=lambda p: p.date or "9999", reverse=True)


def has_style(cfg: dict, name: str) -> bool:
    return (post_dir(cfg, name) / POST_STYLE).exists()


def load_content(directory: Path) -> Dict[str, str]:
    """
    Import content.py from its file and call content().

    The module is executed fresh on every call so edits show up in watch mode.
    A post without a content module simply has no placeholders.
    """
    path = directory / CONTENT_MODULE
    if not path.exists():
        return {}
    spec = importlib.util.spec_from_file_location(f"_content_{directory.name.replace('-', '_')}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    fragments = module.content()
    return {str(k): str(v) for k, v in fragments.items()}


def post_body(cfg: dict, name: str) -> str:
    """Render one post's body HTML (no page chrome)."""
    get_post(cfg, name)
    directory = post_dir(cfg, name)
    source = directory / POST_SOURCE
    if not source.exists():
        raise FileNotFoundError(f"Missing post source: {source}")
    text = source.read_text(encoding="utf-8")
    return render_body(text, load_content(directory), str(source))
