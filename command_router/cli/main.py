import asyncio
from functools import wraps

import click

from command_router.actions.base import CommandContext
from command_router.actions.registry import ActionRegistry
from command_router.config.config import Config
from command_router.routing.definitions import parse_agent_bindings
from command_router.routing.handlers import PERSONA_COMMAND, PERSONA_DESCRIPTION
from command_router.routing.registrar import load_router_commands
from command_router.server.server import Server
from command_router.util.logging import LogConfig, Logger


def async_command(f):
    """Decorator to run async click commands"""

    @wraps(f)
    def wrapper(*args, **kwargs):
        logger = Logger("CLI")
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(f(*args, **kwargs))

        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt, shutting down...")
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))

        finally:
            loop.close()
            asyncio.set_event_loop(None)

    return wrapper


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging (same as --log-level DEBUG)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Set logging level (defaults to log_level from the config)",
)
@click.pass_context
def cli(ctx, verbose, log_level):
    """Command router CLI"""
    ctx.ensure_object(dict)
    config = Config()

    ctx.obj["config"] = config
    ctx.obj["log_level"] = "DEBUG" if verbose else (log_level or config.log_level)
    ctx.obj["logger"] = Logger("CLI")

    LogConfig.set_log_level(ctx.obj["log_level"])


@cli.group()
def server():
    """Server management commands"""


@server.command(name="start")
@click.pass_context
@async_command
async def server_start(ctx):
    """Start the server"""
    logger = ctx.obj["logger"]

    try:
        await Server.run()
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise


@cli.group()
def commands():
    """Inspect and run routed commands"""


@commands.command(name="list")
@click.pass_context
def commands_list(ctx):
    """List the configured agent bindings"""
    config = ctx.obj["config"]
    bindings = parse_agent_bindings(config.agent_definitions)

    if not bindings and not config.persona_script:
        click.echo("No commands configured")
        return

    for binding in bindings:
        click.echo(f"/{binding.command} -> {binding.agent_id} ({binding.timeout_secs}s): {binding.description}")
    if config.persona_script:
        click.echo(f"/{PERSONA_COMMAND} -> {config.persona_script} (5s): {PERSONA_DESCRIPTION}")


@commands.command(name="run")
@click.argument("text")
@click.pass_context
@async_command
async def commands_run(ctx, text):
    """Run a command locally, e.g. command-router commands run '/GE hello'"""
    config = ctx.obj["config"]
    registry = ActionRegistry()
    load_router_commands(registry, config)

    if not text.startswith("/"):
        text = f"/{text}"

    # Local calls come from whoever can run the CLI, so they count as authorized
    result = await registry.execute(text, CommandContext(sender_id="cli", channel="cli", authorized=True))
    if result is None:
        raise click.ClickException(f"Unknown command: {text.split(None, 1)[0]}")

    click.echo(str(result))
    if result.is_error:
        ctx.exit(1)


if __name__ == "__main__":
    cli(obj={})
