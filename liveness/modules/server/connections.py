"""Per-connection activity tracking used to drain the listener."""

import asyncio
from typing import Callable, Dict, Optional

from aiohttp import web


class TrackedConnection(asyncio.Protocol):
    """Wraps the aiohttp protocol of one connection and records its activity.

    A connection is busy from the first byte of a request until the response
    to that request has been written. Otherwise it is idle.
    """

    def __init__(self, protocol: asyncio.Protocol, tracker: "ConnectionTracker"):
        self.protocol = protocol
        self.tracker = tracker
        self.transport: Optional[asyncio.Transport] = None
        self.receiving = False
        self.active = 0

    @property
    def busy(self) -> bool:
        return self.receiving or self.active > 0

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport
        self.tracker.add(self)
        self.protocol.connection_made(transport)

    def data_received(self, data: bytes) -> None:
        if data and not self.receiving:
            self.receiving = True
            self.tracker.changed()
        self.protocol.data_received(data)

    def eof_received(self) -> Optional[bool]:
        return self.protocol.eof_received()

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self.tracker.discard(self)
        self.protocol.connection_lost(exc)

    def pause_writing(self) -> None:
        self.protocol.pause_writing()

    def resume_writing(self) -> None:
        self.protocol.resume_writing()

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()


class ConnectionTracker:
    """Knows which open connections still owe a client a response."""

    def __init__(self):
        self._connections: Dict[asyncio.Protocol, TrackedConnection] = {}
        self._idle = asyncio.Event()
        self._idle.set()
        self.draining = False

    def factory(self, protocol_factory: Callable[[], asyncio.Protocol]) -> Callable[[], TrackedConnection]:
        """Wrap an aiohttp protocol factory so every connection is tracked."""
        return lambda: TrackedConnection(protocol_factory(), self)

    def __len__(self) -> int:
        return len(self._connections)

    @property
    def busy(self) -> int:
        return sum(1 for connection in self._connections.values() if connection.busy)

    def add(self, connection: TrackedConnection) -> None:
        self._connections[connection.protocol] = connection

    def discard(self, connection: TrackedConnection) -> None:
        self._connections.pop(connection.protocol, None)
        self.changed()

    def changed(self) -> None:
        if self.busy:
            self._idle.clear()
        else:
            self._idle.set()

    def request_started(self, request: web.BaseRequest) -> Optional[TrackedConnection]:
        connection = self._connections.get(request.protocol)
        if connection is not None:
            connection.receiving = False
            connection.active += 1
            self.changed()
        return connection

    def request_finished(self, connection: Optional[TrackedConnection]) -> None:
        if connection is None:
            return
        # Bytes that arrived while the request ran belonged to its body
        connection.receiving = False
        connection.active -= 1
        self.changed()

    def start_draining(self) -> int:
        """Refuse keep-alive from now on and close every idle connection.

        Returns:
            The number of connections closed
        """
        self.draining = True
        idle = [connection for connection in self._connections.values() if not connection.busy]
        for connection in idle:
            connection.close()
        return len(idle)

    async def wait_idle(self) -> None:
        """Block until no connection is busy."""
        await self._idle.wait()
