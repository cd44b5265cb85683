import os
import sys
from datetime import date, datetime
from pathlib import Path

import yaml           # pip install pyyaml

CONFIG_FILENAME = "config.yml"


def default_config_path() -> Path:
    return (Path.cwd() / CONFIG_FILENAME).resolve()


def _string_list(value) -> list:
    # accepts a single string or a list
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(x) for x in value]
    return []


def _post_date(name, value):
    """YYYY-MM-DD for a post date; YAML may give a date, a datetime or a string."""
    if not value:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    text = str(value).strip()
    try:
        if text[10:11] not in ("", " ", "T"):
            raise ValueError(text)
        return datetime.strptime(text[:10], "%Y-%m-%d").date().isoformat()
    except ValueError:
        raise ValueError(f"post {name!r} has an invalid date: {value!r}") from None


def _load_posts(data) -> dict:
    """
    Normalize the posts mapping:

      posts:
        random-integers:
          title: Random integers
          date: 2024-10-06

    A post without a date is unpublished.
    """
    posts = {}
    for name, meta in (data or {}).items():
        meta = meta or {}
        if "title" not in meta:
            raise ValueError(f"post {name!r} has no title")
        posts[str(name)] = {
            "title": str(meta["title"]),
            "date": _post_date(name, meta.get("date")),
        }
    return posts


def load_config(config_path: Path = None) -> dict:
    """Load YAML config, apply defaults and resolve paths against its directory."""
    config_path = Path(config_path or default_config_path()).resolve()
    if not config_path.exists():
        print(f"Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    base_dir = config_path.parent

    site_url = os.environ.get("SITE_URL", data.get("site_url") or "")

    cfg = {
        "config_path": config_path,
        "site_title": data.get("site_title", data.get("author", "Home")),
        "author": data.get("author", ""),
        "site_tagline": data.get("site_tagline", ""),
        "site_url": site_url.strip().rstrip("/"),   # optional, for RSS
        "content_dir": (base_dir / data.get("content_dir", "content")).resolve(),
        "output_dir": (base_dir / data.get("output_dir", "dist")).resolve(),
        "staging_dir": (base_dir / data.get("staging_dir", "out")).resolve(),
        "publications": (base_dir / data.get("publications", "publications.yml")).resolve(),
        "socials": list(data.get("socials") or []),
        "extra_head": _string_list(data.get("extra_head", [])),
        "include_drafts": bool(data.get("include_drafts", False)),
        # Preview server
        "host": data.get("host", ""),
        "port": int(data.get("port", 3000)),
        "posts": _load_posts(data.get("posts")),
    }
    return cfg
