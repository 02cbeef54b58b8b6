from typing import Optional

from command_router.actions.base import CommandContext, CommandHandler
from command_router.actions.result import ActionResult
from command_router.routing.definitions import AgentBinding
from command_router.routing.executor import (
    InvocationExecutor,
    InvocationRequest,
    InvocationResult,
    enforced_timeout_ms,
    quote_message,
)
from command_router.util.logging import Logger

PERSONA_COMMAND = "persona"
PERSONA_DESCRIPTION = "Toggle persona mode (on/off)"
TOGGLE_DEFAULT_ARGS = "status"
TOGGLE_TIMEOUT_MS = 5000

PREVIEW_LENGTH = 50


def build_agent_request(binding: AgentBinding, cli_path: str, message: str) -> InvocationRequest:
    """Compose the agent CLI call for one message"""
    return InvocationRequest(
        executable=cli_path,
        arguments=[
            "agent",
            "--agent",
            binding.agent_id,
            "--message",
            quote_message(message),
            "--timeout",
            str(binding.timeout_secs),
        ],
        timeout_ms=enforced_timeout_ms(binding.timeout_secs),
    )


def create_agent_handler(
    binding: AgentBinding,
    executor: InvocationExecutor,
    cli_path: str,
    logger: Optional[Logger] = None,
) -> CommandHandler:
    """Create the handler that forwards ``/<command> <message>`` to the bound agent"""
    logger = logger or Logger("command-router")

    async def handler(ctx: CommandContext) -> ActionResult:
        message = (ctx.args or "").strip()
        if not message:
            return ActionResult.text(f"Usage: /{binding.command} <message>")

        logger.info(f"/{binding.command}: {message[:PREVIEW_LENGTH]}...")

        result = await _invoke(executor, build_agent_request(binding, cli_path, message))
        if not result.ok:
            logger.error(f"/{binding.command} error: {result.error}")
            return ActionResult.failure(result.error)

        return ActionResult.text(result.output or f"({binding.command}: no response)")

    return handler


def create_toggle_handler(
    script_path: str,
    executor: InvocationExecutor,
    logger: Optional[Logger] = None,
) -> CommandHandler:
    """Create the ``/persona <on|off|status>`` handler backed by a control script"""
    logger = logger or Logger("command-router")

    async def handler(ctx: CommandContext) -> ActionResult:
        args = (ctx.args or "").strip() or TOGGLE_DEFAULT_ARGS
        logger.info(f"/{PERSONA_COMMAND} {args}")

        request = InvocationRequest(executable=script_path, arguments=[args], timeout_ms=TOGGLE_TIMEOUT_MS)
        result = await _invoke(executor, request)
        if not result.ok:
            logger.error(f"/{PERSONA_COMMAND} error: {result.error}")
            return ActionResult.failure(result.error)

        return ActionResult.text(result.output)

    return handler


async def _invoke(executor: InvocationExecutor, request: InvocationRequest) -> InvocationResult:
    # Executors are expected to return failures, but a misbehaving one must not take the host down
    try:
        return await executor.invoke(request)
    except Exception as e:
        return InvocationResult.failure(str(e) or type(e).__name__)
