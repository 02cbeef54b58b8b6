from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from command_router.actions.result import ActionResult


@dataclass
class CommandSpec:
    """Specification for a registered command"""

    name: str
    description: str  # Short one-line description for command list
    accepts_args: bool = True  # Whether free-form text after the command is passed on
    require_auth: bool = True  # Only authorized senders may run the command
    help_text: str = ""  # Detailed help text shown with /help <command>


@dataclass
class CommandContext:
    """Per-invocation data handed to a command handler by the host"""

    args: Optional[str] = None
    sender_id: Optional[str] = None
    channel: str = "local"
    authorized: bool = False


CommandHandler = Callable[[CommandContext], Awaitable[ActionResult]]
