import asyncio
import io
import json
import os
from pathlib import Path

import pytest
import tornado.httpclient
import tornado.httpserver
import tornado.testing
import tornado.websocket

from homepage.latency import Latency, StatusLine
from homepage.live import ACK, LiveChannel
from homepage.serve import Preview, make_app, parse_line, print_banner


async def serving(app):
    sock, port = tornado.testing.bind_unused_port()
    server = tornado.httpserver.HTTPServer(app)
    server.add_sockets([sock])
    return server, port


def test_routes(cfg):
    async def scenario():
        channel = LiveChannel()
        app = make_app(cfg, "charts", channel, hot="ws://localhost/ws")
        server, port = await serving(app)
        client = tornado.httpclient.AsyncHTTPClient()
        base = f"http://127.0.0.1:{port}"
        try:
            page = await client.fetch(f"{base}/blog/charts/")
            css = await client.fetch(f"{base}/blog.css")
            post_css = await client.fetch(f"{base}/blog/charts/style.css")
            icon = await client.fetch(f"{base}/icon.png")
            missing = await client.fetch(f"{base}/index.html", raise_error=False)
            other_post = await client.fetch(f"{base}/blog/older/", raise_error=False)
        finally:
            server.stop()
            await server.close_all_connections()
        return page, css, post_css, icon, missing, other_post

    page, css, post_css, icon, missing, other_post = asyncio.run(scenario())
    text = page.body.decode("utf-8")
    assert '<div id="body">' in text
    assert "new WebSocket(\"ws://localhost/ws\")" in text
    assert '<link rel="stylesheet" href="style.css">' in text
    assert css.body == b"/* blog.css */\n"
    assert b".svg" in post_css.body
    assert icon.headers["Content-Type"] == "image/png"
    assert icon.body.startswith(b"\x89PNG")
    assert missing.code == 404
    assert other_post.code == 404


def test_websocket_receives_body_and_acks(cfg):
    acks = []

    async def scenario():
        channel = LiveChannel(on_ack=lambda: acks.append(True))
        channel.publish("<p>first</p>")
        app = make_app(cfg, "charts", channel, hot="ws://localhost/ws")
        server, port = await serving(app)
        try:
            conn = await tornado.websocket.websocket_connect(f"ws://127.0.0.1:{port}/ws")
            first = await conn.read_message()
            await conn.write_message(ACK)

            channel.publish("<p>second</p>")
            second = await conn.read_message()
            await conn.write_message(ACK)

            for _ in range(100):
                if len(acks) == 2:
                    break
                await asyncio.sleep(0.01)
            conn.close()
            for _ in range(100):
                if not channel.clients:
                    break
                await asyncio.sleep(0.01)
            remaining = len(channel.clients)
        finally:
            server.stop()
            await server.close_all_connections()
        return first, second, remaining

    first, second, remaining = asyncio.run(scenario())
    assert first == "<p>first</p>"
    assert second == "<p>second</p>"
    assert acks == [True, True]
    assert remaining == 0


def test_parse_line():
    line = json.dumps({"milliseconds": 3.0, "body": "<p>x</p>"}).encode() + b"\n"
    assert parse_line(line) == {"milliseconds": 3.0, "body": "<p>x</p>"}


@pytest.mark.parametrize("line", [b"[1, 2]\n", b'{"milliseconds": 1}\n', b'{"body": 5}\n'])
def test_parse_line_without_body(line):
    with pytest.raises(ValueError, match="no body"):
        parse_line(line)


def test_parse_line_rejects_garbage():
    with pytest.raises(ValueError):
        parse_line(b"Traceback (most recent call last):\n")


def test_consume_publishes_each_line(cfg):
    status = io.StringIO()
    preview = Preview(cfg, "charts", latency=Latency(StatusLine(status)))
    sent = []

    class Client:
        def send(self, message):
            sent.append(message)

    preview.channel.connect(Client())

    async def scenario():
        stream = asyncio.StreamReader()
        for body in ("<p>a</p>", "<p>b</p>"):
            stream.feed_data(json.dumps({"milliseconds": 1.0, "body": body}).encode() + b"\n")
        stream.feed_data(b"\n")
        stream.feed_eof()
        await preview.consume(stream)

    asyncio.run(scenario())
    assert sent == ["<p>a</p>", "<p>b</p>"]
    assert preview.channel.body == "<p>b</p>"
    assert preview.latency.last_output.what == ("<p>b</p>", 1.0)
    assert "rebuild" in status.getvalue()


def test_banner_shows_url_and_qr_code():
    out = io.StringIO()
    print_banner("http://192.168.1.2:3000/blog/charts/", out)
    lines = out.getvalue().splitlines()
    assert lines[0] == "http://192.168.1.2:3000/blog/charts/"
    assert lines[1] == ""
    assert len(lines) > 10


@pytest.fixture
def child_env(monkeypatch):
    # the pipeline child runs `python -m homepage` from this checkout
    root = str(Path(__file__).resolve().parents[1])
    monkeypatch.setenv("PYTHONPATH", os.pathsep.join(filter(None, [root, os.environ.get("PYTHONPATH")])))


async def wait_for(condition, timeout=30.0):
    for _ in range(int(timeout / 0.05)):
        if condition():
            return
        await asyncio.sleep(0.05)
    raise AssertionError("timed out")


def test_pipeline_publishes_every_rebuild(cfg, child_env, capsys):
    preview = Preview(cfg, "charts", latency=Latency(StatusLine(io.StringIO())))
    sent = []

    class Client:
        def send(self, message):
            sent.append(message)

    preview.channel.connect(Client())
    source = cfg["content_dir"] / "blog" / "charts" / "index.md"

    async def scenario():
        pipeline = asyncio.ensure_future(preview.run_pipeline())
        try:
            await wait_for(lambda: sent or pipeline.done())
            assert not pipeline.done()
            source.write_text("Edited *again*.\n", encoding="utf-8")
            await wait_for(lambda: any("Edited" in body for body in sent) or pipeline.done())
            assert not pipeline.done()
        finally:
            pipeline.cancel()
            with pytest.raises(asyncio.CancelledError):
                await pipeline

    asyncio.run(scenario())
    assert "<p>Intro.</p>" in sent[0]
    assert sent[-1].strip() == "<p>Edited <em>again</em>.</p>"
    assert preview.channel.body == sent[-1]
    assert "[post] Watching" in capsys.readouterr().err


def test_pipeline_failure_is_fatal(cfg, child_env, capsys):
    preview = Preview(cfg, "nope", latency=Latency(StatusLine(io.StringIO())))
    with pytest.raises(RuntimeError, match="exited with code 1"):
        asyncio.run(preview.run_pipeline())
    assert "unknown blog post: nope" in capsys.readouterr().err
