"""Built-in commands registration"""

from typing import TYPE_CHECKING, List, Tuple

from command_router.actions.base import CommandHandler, CommandSpec
from command_router.actions.help import HELP_SPEC, create_help_handler

if TYPE_CHECKING:
    from command_router.actions.registry import ActionRegistry


def get_builtin_commands(registry: "ActionRegistry") -> List[Tuple[CommandSpec, CommandHandler]]:
    """Get all built-in commands that should be registered by default"""
    return [
        (HELP_SPEC, create_help_handler(registry)),
    ]
