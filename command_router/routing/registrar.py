from typing import List, Optional, Sequence

from command_router.actions.registry import ActionRegistry
from command_router.config.config import Config
from command_router.routing.definitions import AgentBinding, parse_agent_bindings
from command_router.routing.executor import InvocationExecutor
from command_router.routing.handlers import (
    PERSONA_COMMAND,
    PERSONA_DESCRIPTION,
    create_agent_handler,
    create_toggle_handler,
)
from command_router.util.logging import Logger


def register_commands(
    registry: ActionRegistry,
    bindings: Sequence[AgentBinding],
    executor: InvocationExecutor,
    cli_path: str,
    persona_script: Optional[str] = None,
    logger: Optional[Logger] = None,
) -> List[str]:
    """Install one handler per binding (plus /persona when configured).

    Returns the registered command names in registration order. Errors raised
    by the registry are not caught.
    """
    logger = logger or Logger("command-router")

    names = []
    for binding in bindings:
        registry.register_command(
            binding.command,
            f"{binding.description} (bypasses main agent)",
            create_agent_handler(binding, executor, cli_path, logger),
            accepts_args=True,
            require_auth=True,
            help_text=f"Forwards the message to the '{binding.agent_id}' agent (timeout {binding.timeout_secs}s).",
        )
        names.append(binding.command)

    if persona_script:
        registry.register_command(
            PERSONA_COMMAND,
            PERSONA_DESCRIPTION,
            create_toggle_handler(persona_script, executor, logger),
            accepts_args=True,
            require_auth=True,
            help_text="Usage: /persona <on|off|status>",
        )
        names.append(PERSONA_COMMAND)

    logger.info(f"Loaded: {', '.join(f'/{name}' for name in names)}")
    return names


def load_router_commands(registry: ActionRegistry, config: Optional[Config] = None) -> List[str]:
    """Parse the configured bindings and register them"""
    config = config or Config()
    logger = Logger("command-router")

    logger.info("Initializing...")
    bindings = parse_agent_bindings(config.agent_definitions)

    return register_commands(
        registry,
        bindings,
        InvocationExecutor(),
        config.cli_path,
        persona_script=config.persona_script,
        logger=logger,
    )
