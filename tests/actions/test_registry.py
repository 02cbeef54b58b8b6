import pytest
from unittest.mock import AsyncMock

from command_router.actions.base import CommandContext
from command_router.actions.registry import ActionRegistry
from command_router.actions.result import ActionResult


def test_singleton_pattern():
    """Test that ActionRegistry is a singleton"""
    registry1 = ActionRegistry()
    registry2 = ActionRegistry()
    assert registry1 is registry2


def test_initialization_registers_help(registry):
    assert "help" in registry.get_commands()
    _, spec = registry.get_command("help")
    assert spec.require_auth is False


def test_register_command(registry):
    handler = AsyncMock(return_value=ActionResult.text("ok"))
    registry.register_command("test", "Test command", handler, accepts_args=False, require_auth=False)

    stored_handler, spec = registry.get_command("test")
    assert stored_handler is handler
    assert spec.name == "test"
    assert spec.description == "Test command"
    assert spec.accepts_args is False
    assert spec.require_auth is False


def test_register_replaces_existing(registry):
    first = AsyncMock()
    second = AsyncMock()
    registry.register_command("dup", "First", first)
    registry.register_command("dup", "Second", second)

    handler, spec = registry.get_command("dup")
    assert handler is second
    assert spec.description == "Second"


def test_register_rejects_invalid(registry):
    with pytest.raises(ValueError):
        registry.register_command("", "Nameless", AsyncMock())
    with pytest.raises(TypeError):
        registry.register_command("broken", "Not callable", "nope")


def test_unregister_command(registry):
    registry.register_command("temp", "Temporary", AsyncMock())
    assert registry.unregister_command("temp") is True
    assert registry.unregister_command("temp") is False
    assert registry.get_command("temp") is None


def test_resolve_name(registry):
    registry.register_command("GE", "Gemini", AsyncMock())
    assert registry.resolve_name("GE") == "GE"
    assert registry.resolve_name("ge") == "GE"
    assert registry.resolve_name("unknown") == "unknown"


def test_resolve_name_ambiguous(registry):
    registry.register_command("GE", "Gemini", AsyncMock())
    registry.register_command("Ge", "Other", AsyncMock())
    assert registry.resolve_name("ge") == "ge"


@pytest.mark.asyncio
async def test_execute_passes_args(registry):
    handler = AsyncMock(return_value=ActionResult.text("done"))
    registry.register_command("GE", "Gemini", handler)

    result = await registry.execute("/GE  hello world", CommandContext(authorized=True))

    assert str(result) == "done"
    context = handler.call_args.args[0]
    assert context.args == "hello world"


@pytest.mark.asyncio
async def test_execute_unknown_command(registry):
    assert await registry.execute("/missing hi", CommandContext(authorized=True)) is None
    assert await registry.execute("not a command", CommandContext(authorized=True)) is None


@pytest.mark.asyncio
async def test_execute_requires_auth(registry):
    handler = AsyncMock(return_value=ActionResult.text("secret"))
    registry.register_command("GE", "Gemini", handler, require_auth=True)

    result = await registry.execute("/GE hello", CommandContext(authorized=False))

    assert str(result) == "Error: Not authorized"
    handler.assert_not_called()


@pytest.mark.asyncio
async def test_execute_drops_args_when_not_accepted(registry):
    handler = AsyncMock(return_value=ActionResult.text("ok"))
    registry.register_command("ping", "Ping", handler, accepts_args=False, require_auth=False)

    await registry.execute("/ping extra words")

    assert handler.call_args.args[0].args is None


@pytest.mark.asyncio
async def test_execute_handler_errors_propagate(registry):
    handler = AsyncMock(side_effect=RuntimeError("host bug"))
    registry.register_command("bad", "Bad", handler, require_auth=False)

    with pytest.raises(RuntimeError, match="host bug"):
        await registry.execute("/bad")
