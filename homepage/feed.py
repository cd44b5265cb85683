import html
import sys
import time
from datetime import datetime, timezone
from email.utils import formatdate
from pathlib import Path

FEED_FILENAME = "rss.xml"


def generate_rss(posts, bodies: dict, cfg: dict, output_dir: Path):
    """
    Generate an RSS 2.0 feed of published posts and write rss.xml.
    description contains rendered HTML (not Markdown), wrapped in CDATA.

    Links must be absolute, so without site_url the feed is skipped.
    """
    site_url = cfg.get("site_url") or ""
    if not site_url:
        print("Skipping RSS feed: no site_url configured (set it in config.yml or SITE_URL)", file=sys.stderr)
        return None

    site_title = html.escape(cfg["site_title"])
    site_tagline = html.escape(cfg.get("site_tagline", ""))
    now = formatdate(time.time())

    items_xml = []
    for post in posts:
        link = f"{site_url}/blog/{post.name}/"
        published = datetime.strptime(post.date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        # CDATA cannot contain its own terminator
        body = bodies[post.name].replace("]]>", "]]]]><![CDATA[>")
        items_xml.append(f"""  <item>
    <title>{html.escape(post.title)}</title>
    <link>{link}</link>
    <guid>{link}</guid>
    <pubDate>{formatdate(published.timestamp())}</pubDate>
    <description><![CDATA[{body}]]></description>
  </item>""")

    rss_xml = f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
<channel>
  <title>{site_title}</title>
  <link>{site_url}/</link>
  <atom:link href="{site_url}/{FEED_FILENAME}" rel="self" type="application/rss+xml"/>
  <description>{site_tagline}</description>
  <lastBuildDate>{now}</lastBuildDate>
{chr(10).join(items_xml)}
</channel>
</rss>
"""

    rss_path = output_dir / FEED_FILENAME
    rss_path.write_text(rss_xml, encoding="utf-8")
    print(f"Wrote {rss_path}")
    return rss_path
