import click
from liveness.modules.server.commands import create_serve_commands
from liveness.modules.logging import create_logger


class LivenessContext:
    """Context object to store CLI state."""
    def __init__(self):
        self.logger = None


serve_command = create_serve_commands()

@click.group(invoke_without_command=True)
@click.option('--output', '-o',
              type=click.Choice(['colorful', 'plain', 'json']),
              default='plain',
              help='Log format (colorful for terminals, plain for containers, json for log collectors)',
              envvar='LIVENESS_OUTPUT')
@click.option('--log-level', '-l',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              default='INFO',
              help='Set the logging level',
              envvar='LIVENESS_LOG_LEVEL')
@click.pass_context
def cli(ctx, output, log_level):
    """Liveness service: a /health endpoint with graceful shutdown."""
    ctx.ensure_object(LivenessContext).logger = create_logger(output, log_level)
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve_command)

cli.add_command(serve_command)

def main():
    cli()

if __name__ == '__main__':
    main()
