from typing import Optional

import click

from .command.serve import ServeCommand
from .config import PORT_ENV_VAR, ServerConfig


def create_serve_commands() -> click.Command:
    """Create the serve command."""

    @click.command(name="serve")
    @click.option("--port", type=str, default=None, envvar=PORT_ENV_VAR,
                  help="Port to listen on, used verbatim in the bind address [default: $PORT or 8080]")
    @click.pass_context
    def serve(ctx, port: Optional[str]):
        """Serve /health until SIGINT or SIGTERM, then shut down gracefully."""
        config = ServerConfig(port=port) if port else ServerConfig.from_env()
        command = ServeCommand(logger=ctx.obj.logger, config=config)
        ctx.exit(command.run())

    return serve
