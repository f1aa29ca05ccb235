"""Listener owning the HTTP socket and its serve loop."""

import asyncio
import errno
from enum import Enum
from typing import Any, List, Optional, Union

from aiohttp import web

from ..logging import BaseLogger
from .config import ServerConfig
from .connections import ConnectionTracker
from .errors import BindFailure, PortInUse, ShutdownTimeout
from .health import create_app

SHUTDOWN_DEADLINE = 2.0
# Time given to connections still open after the drain before they are cut
FORCE_CLOSE_GRACE = 0.1


class ServerState(str, Enum):
    STARTING = "starting"
    SERVING = "serving"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    FAILED = "failed"


class Listener:
    """Serves an aiohttp application on the configured address.

    Serving happens on the running event loop, so `start` returns as soon as
    the socket is bound and the caller is free to wait for shutdown.
    """

    def __init__(self, config: ServerConfig, logger: BaseLogger, app: Optional[web.Application] = None):
        """
        Initialize the listener.

        Args:
            config: Bind address settings
            logger: Logger instance for lifecycle events
            app: Application to serve, defaults to the health application
        """
        self.config = config
        self.logger = logger
        self.app = app if app is not None else create_app()
        self.app.middlewares.append(self._track_requests)
        self.state = ServerState.STARTING
        self.connections = ConnectionTracker()
        self._runner: Optional[web.AppRunner] = None
        self._server: Optional[asyncio.AbstractServer] = None

    @property
    def address(self) -> str:
        return self.config.address

    @property
    def addresses(self) -> List[Any]:
        """Socket names actually bound, empty when not serving."""
        if self._server is None:
            return []
        return [sock.getsockname() for sock in self._server.sockets]

    @property
    def port(self) -> Optional[int]:
        addresses = self.addresses
        return addresses[0][1] if addresses else None

    @property
    def inflight(self) -> int:
        """Connections that still owe a client a response."""
        return self.connections.busy

    @web.middleware
    async def _track_requests(self, request: web.Request, handler) -> web.StreamResponse:
        connection = self.connections.request_started(request)
        try:
            try:
                response = await handler(request)
            except web.HTTPException as exc:
                if self.connections.draining:
                    exc.force_close()
                raise
            if self.connections.draining:
                response.force_close()
            # Written here so the connection only counts as idle once the client has it
            try:
                await response.prepare(request)
                await response.write_eof()
            except ConnectionError as e:
                self.logger.log_debug(f"Client went away during {request.method} {request.path}: {e}")
            return response
        finally:
            self.connections.request_finished(connection)

    def _resolve_port(self) -> Union[int, str]:
        """Numeric ports are range checked, anything else is left to the resolver as a service name."""
        port = self.config.port
        try:
            number = int(port)
        except ValueError:
            return port
        if not 0 <= number <= 65535:
            raise BindFailure(self.address, f"invalid port {number}")
        return number

    async def start(self) -> None:
        """Bind the address and begin serving.

        Raises:
            PortInUse: If another socket already listens on the address
            BindFailure: If the address cannot be bound for any other reason
        """
        self.state = ServerState.STARTING
        try:
            port = self._resolve_port()
        except BindFailure:
            self.state = ServerState.FAILED
            raise

        runner = web.AppRunner(self.app, access_log=None, shutdown_timeout=FORCE_CLOSE_GRACE)
        await runner.setup()
        loop = asyncio.get_running_loop()
        try:
            server = await loop.create_server(
                self.connections.factory(runner.server),
                host=self.config.host or None,
                port=port,
                reuse_address=True,
            )
        except OSError as e:
            await runner.cleanup()
            self.state = ServerState.FAILED
            if e.errno == errno.EADDRINUSE:
                raise PortInUse(self.address) from e
            raise BindFailure(self.address, e.strerror or str(e)) from e

        self._runner = runner
        self._server = server
        self.state = ServerState.SERVING
        self.logger.log_info(f"Starting server on {self.address}")

    async def stop(self, deadline: float = SHUTDOWN_DEADLINE) -> None:
        """Stop accepting connections and drain the open ones.

        Idle connections are closed at once. Connections with a request partly
        received or still being handled get until the deadline, after which
        they are cut. Listener resources are released either way.

        Args:
            deadline: Seconds to wait for busy connections

        Raises:
            ShutdownTimeout: If connections were still busy at the deadline
        """
        if self._runner is None or self._server is None:
            return

        runner, server = self._runner, self._server
        self._runner = None
        self._server = None
        self.state = ServerState.SHUTTING_DOWN

        pending = 0
        try:
            server.close()
            closed = self.connections.start_draining()
            if closed:
                self.logger.log_debug(f"Closed {closed} idle connection(s)")
            try:
                await asyncio.wait_for(self.connections.wait_idle(), timeout=deadline)
            except asyncio.TimeoutError:
                pending = self.connections.busy
                self.logger.log_warning(f"{pending} connection(s) still busy after {deadline} seconds, closing them")
        finally:
            await runner.cleanup()
            self.state = ServerState.FAILED if pending else ServerState.STOPPED

        if pending:
            raise ShutdownTimeout(deadline, pending)
