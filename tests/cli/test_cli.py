import os

from click.testing import CliRunner
from unittest.mock import AsyncMock, patch

from command_router.cli.main import cli
from command_router.routing.executor import InvocationResult


def run(args, env=None):
    runner = CliRunner()
    with patch.dict(os.environ, env or {}):
        return runner.invoke(cli, args, obj={})


def test_commands_list_defaults():
    result = run(["commands", "list"])

    assert result.exit_code == 0
    assert "/GE -> ge (120s): Send to GE agent (bypasses main)" in result.output
    assert "/eng -> engineer (300s)" in result.output
    assert "/persona" not in result.output


def test_commands_list_with_persona():
    result = run(
        ["commands", "list"],
        {"COMMAND_ROUTER_AGENTS": "X:y", "PERSONA_SCRIPT_PATH": "/opt/persona.sh"},
    )

    assert result.exit_code == 0
    assert "/X -> y (120s): Send to y agent" in result.output
    assert "/persona -> /opt/persona.sh (5s)" in result.output


def test_commands_list_empty():
    result = run(["commands", "list"], {"COMMAND_ROUTER_AGENTS": ""})
    assert "No commands configured" in result.output


def test_commands_run_invokes_agent():
    with patch(
        "command_router.routing.executor.InvocationExecutor.invoke",
        new_callable=AsyncMock,
        return_value=InvocationResult.success("hi from ge"),
    ) as invoke:
        result = run(["commands", "run", "/GE hello"])

    assert result.exit_code == 0
    assert "hi from ge" in result.output
    request = invoke.call_args.args[0]
    assert request.command_line == 'node /app/openclaw.mjs agent --agent ge --message "hello" --timeout 120'


def test_commands_run_against_real_process():
    result = run(["commands", "run", "GE hello world"], {"OPENCLAW_CLI_PATH": "echo"})

    assert result.exit_code == 0
    assert "agent --agent ge --message hello world --timeout 120" in result.output


def test_commands_run_usage():
    result = run(["commands", "run", "/GE"])
    assert result.exit_code == 0
    assert "Usage: /GE <message>" in result.output


def test_commands_run_failure_exit_code():
    result = run(["commands", "run", "/GE hi"], {"OPENCLAW_CLI_PATH": "false"})

    assert result.exit_code == 1
    assert "Error: Command failed: false agent --agent ge" in result.output


def test_commands_run_unknown():
    result = run(["commands", "run", "/nope"])

    assert result.exit_code == 1
    assert "Unknown command: /nope" in result.output
