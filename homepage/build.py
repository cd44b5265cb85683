import shutil
import sys
from pathlib import Path

from homepage.blog import CONTENT_MODULE, POST_SOURCE, has_style, list_posts, post_body, post_dir
from homepage.feed import generate_rss
from homepage.logo import logo_jpeg, logo_png, logo_svg
from homepage.publications import load_publications, render_publications
from homepage.render import render_markdown
from homepage.templates import blog_html, index_html

# Copied as-is from the content directory to the site root
STATIC_FILES = ["all.css", "blog.css", "index.css"]
PHOTO = "photo.jpeg"
INTRO_FILENAME = "index.md"


def copy_static(content_dir: Path, out: Path):
    for name in STATIC_FILES:
        src = content_dir / name
        if not src.exists():
            print(f"WARNING: {name} not found at {src}", file=sys.stderr)
            continue
        shutil.copy2(src, out / name)
        print(f"Copied {name} to {out / name}")


def write_photo(content_dir: Path, out: Path):
    src = content_dir / PHOTO
    if src.exists():
        shutil.copy2(src, out / PHOTO)
        print(f"Copied {PHOTO} to {out / PHOTO}")
        return
    print(f"No {PHOTO} at {src}; using the logo in its place", file=sys.stderr)
    (out / PHOTO).write_bytes(logo_jpeg())


def write_logo(out: Path):
    (out / "icon.png").write_bytes(logo_png())
    (out / "logo.svg").write_text(logo_svg(), encoding="utf-8")
    print(f"Wrote {out / 'icon.png'} and {out / 'logo.svg'}")


def render_intro(content_dir: Path) -> str:
    path = content_dir / INTRO_FILENAME
    if not path.exists():
        return ""
    return render_markdown(path.read_text(encoding="utf-8"))


def generate(cfg: dict, out: Path):
    """Write the whole site into out/, which must not exist yet."""
    content_dir = cfg["content_dir"]
    out.mkdir(parents=True)

    copy_static(content_dir, out)
    write_photo(content_dir, out)
    write_logo(out)

    posts = list_posts(cfg, include_drafts=cfg["include_drafts"])

    pubs = render_publications(load_publications(cfg["publications"]))
    index_path = out / "index.html"
    index_path.write_text(index_html(cfg, render_intro(content_dir), pubs, posts), encoding="utf-8")
    print(f"Wrote {index_path}")

    bodies = {}
    for post in posts:
        target = out / "blog" / post.name
        # style.css and assets/ come along if the post has them
        shutil.copytree(
            post_dir(cfg, post.name),
            target,
            ignore=shutil.ignore_patterns(POST_SOURCE, CONTENT_MODULE, "__pycache__", "*.pyc"),
        )
        bodies[post.name] = post_body(cfg, post.name)
        page = blog_html(
            cfg,
            post.title,
            post.date or "unpublished",
            bodies[post.name],
            css=has_style(cfg, post.name),
        )
        (target / "index.html").write_text(page, encoding="utf-8")
        print(f"Wrote {target / 'index.html'}")

    generate_rss([p for p in posts if p.published], bodies, cfg, out)


def swap(out: Path, dist: Path):
    """Move out/ into place as dist/; the old dist/ is removed afterwards."""
    tmp = dist.with_name(dist.name + ".old")
    if tmp.exists():
        shutil.rmtree(tmp)
    try:
        dist.rename(tmp)
    except FileNotFoundError:
        pass  # first build
    out.rename(dist)
    if tmp.exists():
        shutil.rmtree(tmp)


def build_site(cfg: dict):
    out = cfg["staging_dir"]
    if out.exists():
        shutil.rmtree(out)
    generate(cfg, out)
    swap(out, cfg["output_dir"])
    print(f"Published {cfg['output_dir']}")
