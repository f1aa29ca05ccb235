import asyncio
from ...logging import BaseLogger, intercept_stdlib_logging
from ...shutdown import ShutdownCoordinator
from ..config import ServerConfig
from ..errors import BindFailure
from ..listener import Listener, SHUTDOWN_DEADLINE


class ServeCommand:
    """Command class for running the liveness server until a termination signal."""
    
    def __init__(
        self,
        logger: BaseLogger,
        config: ServerConfig,
        shutdown_timeout: float = SHUTDOWN_DEADLINE
    ):
        """
        Initialize the serve command.
        
        Args:
            logger: Logger instance
            config: Bind address settings
            shutdown_timeout: Seconds in-flight requests get to finish on shutdown
        """
        self.logger = logger
        self.config = config
        self.shutdown_timeout = shutdown_timeout

    async def serve(self) -> int:
        """Serve until shutdown and return the process exit code."""
        intercept_stdlib_logging(self.logger)
        listener = Listener(self.config, self.logger)
        coordinator = ShutdownCoordinator(listener, self.logger, shutdown_timeout=self.shutdown_timeout)

        # Handlers go in before binding so an early signal still drains
        coordinator.setup_signal_handlers()
        try:
            try:
                await listener.start()
            except BindFailure as err:
                self.logger.log_error(f"Server failed to start: {str(err)}")
                return 1
            return await coordinator.run()
        finally:
            coordinator.restore_signal_handlers(ignore_further=coordinator.is_shutting_down)

    def run(self) -> int:
        """
        Run the serve command.
        
        Returns:
            0 on clean shutdown, 1 on bind failure or shutdown timeout
        """
        try:
            return asyncio.run(self.serve())
        except Exception as err:
            self.logger.log_error(f"Unexpected error while serving: {str(err)}")
            raise
