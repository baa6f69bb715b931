"""Broadcasting news updates to connected websocket clients."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Awaitable, Callable, Iterable

log = logging.getLogger(__name__)

WRITE_WAIT = 10.0
DEFAULT_QUEUE_SIZE = 256
NEWLINE = b"\n"


def join_messages(messages: Iterable[bytes]) -> bytes:
    """Queued messages combined into one frame, separated by newlines."""
    return NEWLINE.join(messages)


class Hub:
    """The set of registered clients, each receiving every broadcast."""

    def __init__(self) -> None:
        self.clients: set[Client] = set()

    def register(self, client: "Client") -> None:
        self.clients.add(client)

    def unregister(self, client: "Client") -> None:
        """Drop a registered client and close its queue."""
        if client in self.clients:
            self.clients.discard(client)
            client.close()

    def broadcast(self, message: bytes) -> int:
        """Queue a message for every client; clients that cannot keep up are dropped.

        Returns how many clients accepted the message.
        """
        delivered = 0
        for client in list(self.clients):
            if client.push(message):
                delivered += 1
            else:
                client.close()
                self.clients.discard(client)
        return delivered


class Client:
    """A connection's bounded outbound queue, registered with a hub on creation."""

    def __init__(self, hub: Hub, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.hub = hub
        self.queue_size = queue_size
        self.closed = False
        self._pending: deque[bytes] = deque()
        self._ready = asyncio.Event()
        hub.register(self)

    def push(self, message: bytes) -> bool:
        """Queue a message; False when closed or the queue is full."""
        if self.closed or len(self._pending) >= self.queue_size:
            return False
        self._pending.append(message)
        self._ready.set()
        return True

    def close(self) -> None:
        """Stop accepting messages; the writer delivers what is queued and ends."""
        self.closed = True
        self._ready.set()

    async def write_data(self, send: Callable[[bytes], Awaitable[None]]) -> None:
        """Send queued messages until the client is closed or a write fails."""
        try:
            while True:
                await self._ready.wait()
                self._ready.clear()
                if self._pending:
                    batch = list(self._pending)
                    self._pending.clear()
                    try:
                        await asyncio.wait_for(send(join_messages(batch)), WRITE_WAIT)
                    except Exception as exc:  # noqa: BLE001 - any write failure ends the writer
                        log.info("websocket write failed: %s", exc)
                        return
                    if self._pending:
                        self._ready.set()
                    continue
                if self.closed:
                    return
        finally:
            self.hub.unregister(self)