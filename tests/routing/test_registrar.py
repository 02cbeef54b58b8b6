import os

import pytest
from unittest.mock import AsyncMock, Mock, patch

from command_router.actions.base import CommandContext
from command_router.config.config import Config
from command_router.routing.definitions import parse_agent_bindings
from command_router.routing.executor import InvocationExecutor, InvocationResult
from command_router.routing.registrar import load_router_commands, register_commands


@pytest.fixture
def executor():
    executor = Mock(spec=InvocationExecutor)
    executor.invoke = AsyncMock(return_value=InvocationResult.success("agent says hi"))
    return executor


def test_registers_one_command_per_binding(registry, executor):
    bindings = parse_agent_bindings("GE:ge:Gemini agent:120,eng:engineer:Engineer agent:300")
    logger = Mock()

    names = register_commands(registry, bindings, executor, "agent-cli", logger=logger)

    assert names == ["GE", "eng"]
    _, spec = registry.get_command("GE")
    assert spec.description == "Gemini agent (bypasses main agent)"
    assert spec.accepts_args is True
    assert spec.require_auth is True
    logger.info.assert_called_once_with("Loaded: /GE, /eng")


def test_registers_persona_when_configured(registry, executor):
    logger = Mock()
    names = register_commands(
        registry, parse_agent_bindings("GE:ge"), executor, "agent-cli", persona_script="/opt/persona.sh", logger=logger
    )

    assert names == ["GE", "persona"]
    assert registry.get_command("persona") is not None
    logger.info.assert_called_once_with("Loaded: /GE, /persona")


def test_no_persona_without_script(registry, executor):
    register_commands(registry, parse_agent_bindings("GE:ge"), executor, "agent-cli", persona_script="", logger=Mock())
    assert registry.get_command("persona") is None


def test_duplicate_command_last_wins(registry, executor):
    register_commands(registry, parse_agent_bindings("GE:first,GE:second"), executor, "agent-cli", logger=Mock())

    _, spec = registry.get_command("GE")
    assert spec.description == "Send to second agent (bypasses main agent)"


def test_registration_errors_propagate(executor):
    failing_registry = Mock()
    failing_registry.register_command.side_effect = RuntimeError("table locked")

    with pytest.raises(RuntimeError, match="table locked"):
        register_commands(failing_registry, parse_agent_bindings("GE:ge"), executor, "agent-cli", logger=Mock())


@pytest.mark.asyncio
async def test_registered_handler_invokes_agent(registry, executor):
    register_commands(registry, parse_agent_bindings("GE:ge:Gemini:60"), executor, "agent-cli", logger=Mock())

    result = await registry.execute("/GE hello there", CommandContext(authorized=True))

    assert str(result) == "agent says hi"
    request = executor.invoke.call_args.args[0]
    assert request.command_line == 'agent-cli agent --agent ge --message "hello there" --timeout 60'
    assert request.timeout_ms == 70000


def test_load_router_commands_uses_config(registry):
    with patch.dict(
        os.environ,
        {
            "COMMAND_ROUTER_AGENTS": "ops:operator:Ops agent:45",
            "PERSONA_SCRIPT_PATH": "/opt/persona.sh",
            "OPENCLAW_CLI_PATH": "openclaw",
        },
    ):
        Config.reset()
        names = load_router_commands(registry, Config())

    assert names == ["ops", "persona"]


def test_load_router_commands_defaults(registry):
    names = load_router_commands(registry, Config())
    assert names == ["GE", "eng"]


def test_load_router_commands_empty_agents(registry):
    with patch.dict(os.environ, {"COMMAND_ROUTER_AGENTS": ""}):
        Config.reset()
        names = load_router_commands(registry, Config())

    assert names == []
    assert set(registry.get_commands()) == {"help"}
