"""
Live preview of a single blog post.

Serves the post page and its stylesheets, runs ``python -m homepage post NAME``
as a child process, and pushes every body it prints to the open browser tabs
over a WebSocket. The terminal shows the URL (and a QR code for phones), then
a latency readout that is redrawn on every change, output and acknowledgment.
"""
import asyncio
import json
import re
import socket
import sys

import qrcode
import tornado.web

from homepage.blog import get_post, has_style, post_dir
from homepage.latency import Latency
from homepage.live import LiveChannel, LiveSocket
from homepage.logo import logo_png
from homepage.templates import blog_html
from homepage.watcher import start_watching

# Pipeline lines hold a whole rendered post
LINE_LIMIT = 64 * 1024 * 1024


def detect_address() -> str:
    """First non-loopback IPv4 address, so phones on the LAN can connect."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        try:
            # no packets are sent for a UDP connect
            s.connect(("10.255.255.255", 1))
            address = s.getsockname()[0]
        except OSError:
            address = "127.0.0.1"
    if address.startswith("127."):
        print("[serve] WARNING: no network address found; serving on localhost only", file=sys.stderr)
    return address


class PageHandler(tornado.web.RequestHandler):
    def initialize(self, page: str):
        self.page = page

    def get(self):
        self.set_header("Content-Type", "text/html; charset=utf-8")
        self.write(self.page)


class BytesHandler(tornado.web.RequestHandler):
    def initialize(self, data: bytes, content_type: str):
        self.data = data
        self.content_type = content_type

    def get(self):
        self.set_header("Content-Type", self.content_type)
        self.write(self.data)


def make_app(cfg: dict, name: str, channel: LiveChannel, hot: str) -> tornado.web.Application:
    post = get_post(cfg, name)
    content_dir = cfg["content_dir"]
    page = blog_html(
        cfg,
        post.title,
        post.date or "unpublished",
        "",
        css=has_style(cfg, name),
        hot=hot,
    )
    return tornado.web.Application(
        [
            (r"/(all\.css|blog\.css)", tornado.web.StaticFileHandler, {"path": str(content_dir)}),
            (r"/icon\.png", BytesHandler, {"data": logo_png(), "content_type": "image/png"}),
            (rf"/blog/{re.escape(name)}/(style\.css)", tornado.web.StaticFileHandler, {"path": str(post_dir(cfg, name))}),
            (rf"/blog/{re.escape(name)}/", PageHandler, {"page": page}),
            (r"/ws", LiveSocket, {"channel": channel}),
        ]
    )


def print_banner(url: str, stream=None):
    stream = stream or sys.stdout
    print(url, file=stream)
    print(file=stream)
    qr = qrcode.QRCode()
    qr.add_data(url)
    qr.print_ascii(out=stream)
    stream.flush()


def parse_line(line: bytes) -> dict:
    """One pipeline line -> result dict; anything else is a broken pipeline."""
    result = json.loads(line)
    if not isinstance(result, dict) or not isinstance(result.get("body"), str):
        raise ValueError(f"build pipeline line has no body: {line[:200]!r}")
    return result


class Preview:
    def __init__(self, cfg: dict, name: str, latency: Latency = None):
        self.cfg = cfg
        self.name = name
        self.latency = latency or Latency()
        self.channel = LiveChannel(on_ack=self.latency.acked, log=self.latency.status.log)

    def publish(self, result: dict):
        self.latency.output(result["body"], result.get("milliseconds"))
        self.channel.publish(result["body"])

    async def consume(self, stream):
        """Publish every result line until the pipeline closes its stdout."""
        async for line in stream:
            if line.strip():
                self.publish(parse_line(line))

    async def forward(self, stream):
        """Pipeline diagnostics go above the latency readout instead of under it."""
        async for line in stream:
            self.latency.status.log(line.decode("utf-8", "replace").rstrip("\n"))

    async def run_pipeline(self):
        args = [sys.executable, "-m", "homepage", "--config", str(self.cfg["config_path"]), "post", self.name]
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=LINE_LIMIT,
        )
        diagnostics = asyncio.ensure_future(self.forward(proc.stderr))
        try:
            await self.consume(proc.stdout)
            returncode = await proc.wait()
            await diagnostics
        finally:
            if proc.returncode is None:
                proc.terminate()
                await proc.wait()
            diagnostics.cancel()
        if returncode != 0:
            raise RuntimeError(f"build pipeline exited with code {returncode}")

    async def run(self):
        host = self.cfg["host"] or detect_address()
        port = self.cfg["port"]
        app = make_app(self.cfg, self.name, self.channel, hot=f"ws://{host}:{port}/ws")
        server = app.listen(port)
        print_banner(f"http://{host}:{port}/blog/{self.name}/")

        observer = start_watching([self.cfg["content_dir"]], self.latency.file_changed)
        try:
            await self.run_pipeline()
        finally:
            observer.stop()
            observer.join()
            server.stop()


def main(cfg: dict, name: str) -> int:
    try:
        asyncio.run(Preview(cfg, name).run())
    except KeyboardInterrupt:
        print("\n[serve] Stopped.")
    return 0
