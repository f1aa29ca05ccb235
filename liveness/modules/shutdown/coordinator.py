"""Shutdown coordinator for draining the listener on termination signals."""

import asyncio
import signal
from enum import Enum
from typing import Optional, Sequence

from ..logging import BaseLogger
from ..server.listener import Listener, SHUTDOWN_DEADLINE

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CoordinatorState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class ShutdownCoordinator:
    """Waits for a termination signal, then drains the listener exactly once."""

    def __init__(
        self,
        listener: Listener,
        logger: BaseLogger,
        shutdown_timeout: float = SHUTDOWN_DEADLINE,
        signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
    ):
        """
        Initialize the shutdown coordinator.

        Args:
            listener: Listener to stop once shutdown is requested
            logger: Logger instance for logging shutdown events
            shutdown_timeout: Seconds in-flight requests get to finish
            signals: Signals that request shutdown
        """
        self.listener = listener
        self.logger = logger
        self.shutdown_timeout = shutdown_timeout
        self.signals = tuple(signals)
        self.state: Optional[CoordinatorState] = None
        self.exit_code: Optional[int] = None
        self._shutdown_requested = asyncio.Event()
        self._installed: list[signal.Signals] = []

    @property
    def is_shutting_down(self) -> bool:
        """Check if shutdown was requested."""
        return self._shutdown_requested.is_set()

    def setup_signal_handlers(self) -> None:
        """
        Route the shutdown signals to this coordinator.
        Must be called from the main thread with the event loop running.
        """
        loop = asyncio.get_running_loop()
        for sig in self.signals:
            loop.add_signal_handler(sig, self._handle_signal, sig)
            self._installed.append(sig)

    def restore_signal_handlers(self, ignore_further: bool = False) -> None:
        """
        Restore the default signal handlers.

        Args:
            ignore_further: Ignore the shutdown signals instead, so a late signal
                cannot interrupt a process that is already exiting
        """
        loop = asyncio.get_running_loop()
        while self._installed:
            sig = self._installed.pop()
            loop.remove_signal_handler(sig)
            if ignore_further:
                signal.signal(sig, signal.SIG_IGN)

    def _handle_signal(self, sig_num: int) -> None:
        self.trigger_shutdown(signal.Signals(sig_num).name)

    def trigger_shutdown(self, reason: str = "shutdown request") -> None:
        """Request shutdown. Only the first request has any effect."""
        if self._shutdown_requested.is_set():
            self.logger.log_debug(f"Ignoring {reason}, shutdown already in progress")
            return
        self.logger.log_info(f"Received {reason}, initiating graceful shutdown")
        self._shutdown_requested.set()

    async def wait_for_shutdown(self) -> None:
        """Block until shutdown is requested."""
        await self._shutdown_requested.wait()

    async def drain(self) -> int:
        """
        Stop the listener within the shutdown timeout.

        Returns:
            The process exit code: 0 when every request drained in time
        """
        if self.state in (CoordinatorState.DRAINING, CoordinatorState.TERMINATED):
            return self.exit_code if self.exit_code is not None else 1

        self.state = CoordinatorState.DRAINING
        self.logger.log_info("Shutting down server...")
        try:
            await self.listener.stop(self.shutdown_timeout)
        except Exception as e:
            self.logger.log_error(f"Server shutdown failed: {str(e)}")
            self.exit_code = 1
        else:
            self.logger.log_info("Server exited properly")
            self.exit_code = 0

        self.state = CoordinatorState.TERMINATED
        return self.exit_code

    async def run(self) -> int:
        """
        Wait for a shutdown request, then drain the listener.

        Returns:
            The process exit code
        """
        self.state = CoordinatorState.RUNNING
        await self.wait_for_shutdown()
        return await self.drain()
