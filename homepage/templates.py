import html
import json

from homepage.live import ACK

HIGHLIGHT_CSS = "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.10.0/styles/monokai.min.css"
KATEX_CSS = "https://cdnjs.cloudflare.com/ajax/libs/KaTeX/0.5.1/katex.min.css"
FORK_AWESOME_CSS = "https://cdn.jsdelivr.net/npm/fork-awesome@1.2.0/css/fork-awesome.min.css"

FAVICON = '<link rel="icon" type="image/png" href="/icon.png">'

# Replaces the post body with every message and acknowledges it
HOT_SCRIPT = """<script>
(function () {
  var ws = new WebSocket(%URL%);
  ws.onmessage = function (event) {
    document.getElementById("body").innerHTML = event.data;
    ws.send(%ACK%);
  };
})();
</script>"""


def hot_script(url: str) -> str:
    return HOT_SCRIPT.replace("%URL%", json.dumps(url)).replace("%ACK%", json.dumps(ACK))


def extra_head_html(cfg: dict) -> str:
    items = cfg.get("extra_head") or []
    if not items:
        return ""
    return "\n  " + "\n  ".join(items)


def socials_html(cfg: dict) -> str:
    links = []
    for social in cfg.get("socials") or []:
        icon = html.escape(social["icon"])
        href = html.escape(social["href"])
        links.append(f'<a class="fa fa-{icon} fa-2x" href="{href}"></a>')
    return "\n          ".join(links)


def blog_list_html(posts) -> str:
    items = []
    for post in posts:
        name = html.escape(post.title)
        items.append(f'<li>{post.date or "unpublished"} <a href="/blog/{post.name}/">{name}</a></li>')
    return "<ul>\n" + "\n".join(items) + "\n</ul>"


def index_html(cfg: dict, intro: str, pubs: str, posts) -> str:
    """Render the homepage."""
    author = html.escape(cfg["author"] or cfg["site_title"])
    site_title = html.escape(cfg["site_title"])
    feed_link = ""
    if cfg.get("site_url"):
        feed_link = f'\n  <link rel="alternate" type="application/rss+xml" title="{site_title}" href="/rss.xml">'

    return f"""<!DOCTYPE html>
<html lang="en-us">
<head>
  <meta charset="utf-8">
  {FAVICON}
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="stylesheet" href="{FORK_AWESOME_CSS}">
  <link rel="stylesheet" href="/all.css">
  <link rel="stylesheet" href="/index.css">{feed_link}{extra_head_html(cfg)}
  <title>{site_title}</title>
</head>
<body>
  <main>
    <div class="me">
      <img class="photo" src="photo.jpeg" width="100" height="100">
      <h1 class="name">{author}</h1>
    </div>
    <div class="socials">
          {socials_html(cfg)}
    </div>
{intro}
    <h2>Publications</h2>
{pubs}
    <h2>Blog</h2>
{blog_list_html(posts)}
  </main>
</body>
</html>
"""


def blog_html(cfg: dict, title: str, date: str, body: str, *, css: bool = False, hot: str = None) -> str:
    """
    Render a blog post page.

    css: link the post's own style.css
    hot: WebSocket URL for live preview; the body is then filled in by messages
    """
    author = html.escape(cfg["author"] or cfg["site_title"])
    title = html.escape(title)
    post_css = '\n  <link rel="stylesheet" href="style.css">' if css else ""
    script = f"\n{hot_script(hot)}" if hot else ""

    return f"""<!DOCTYPE html>
<html lang="en-us">
<head>
  <meta charset="utf-8">
  {FAVICON}
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="stylesheet" href="{HIGHLIGHT_CSS}">
  <link rel="stylesheet" href="{KATEX_CSS}">
  <link rel="stylesheet" href="/all.css">
  <link rel="stylesheet" href="/blog.css">{post_css}{extra_head_html(cfg)}
  <title>{title} | {author}</title>
</head>
<body>
  <main>
    <h1>{title}</h1>
    <p><em>by <a href="/">{author}</a>, {html.escape(date)}</em></p>
    <div id="body">
{body}
    </div>
  </main>{script}
</body>
</html>
"""
