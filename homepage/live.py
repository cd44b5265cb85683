import sys
from typing import Callable, Optional

import tornado.websocket
from tornado.websocket import WebSocketClosedError

# Sent by the preview page after it has swapped in a new body
ACK = "ack"


def warn(message: str):
    print(message, file=sys.stderr)


class LiveChannel:
    """
    Pushes the latest rendered post body to every connected preview tab.

    Clients only need a non-blocking ``send(message)`` that raises
    WebSocketClosedError once the connection is gone.
    """

    def __init__(self, on_ack: Optional[Callable[[], None]] = None, log: Optional[Callable[[str], None]] = None):
        self.clients = set()
        self.body = None
        self._on_ack = on_ack
        self.log = log or warn

    def connect(self, client):
        if self.body is not None:
            client.send(self.body)
        self.clients.add(client)

    def disconnect(self, client):
        self.clients.discard(client)

    def broadcast(self, body: str):
        # snapshot: a client may disconnect mid-broadcast
        for client in list(self.clients):
            try:
                client.send(body)
            except WebSocketClosedError:
                self.clients.discard(client)

    def publish(self, body: str):
        self.body = body
        self.broadcast(body)

    def receive(self, client, message):
        if message == ACK:
            if self._on_ack is not None:
                self._on_ack()
        else:
            self.log(f"[serve] Unrecognized message: {message!r}")


class LiveSocket(tornado.websocket.WebSocketHandler):
    def initialize(self, channel: LiveChannel):
        self.channel = channel

    def check_origin(self, origin):
        # phones on the LAN load the page from the machine's address
        return True

    def open(self):
        self.channel.connect(self)

    def on_close(self):
        self.channel.disconnect(self)

    def on_message(self, message):
        self.channel.receive(self, message)

    def send(self, message: str):
        # not awaited: a slow tab must not hold up the others
        future = self.write_message(message)
        future.add_done_callback(self._sent)

    def _sent(self, future):
        if not future.cancelled() and future.exception() is not None:
            self.channel.log(f"[serve] Dropped update to {self.request.remote_ip}: {future.exception()!r}")
