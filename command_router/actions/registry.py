from typing import Dict, Optional, Tuple

from command_router.actions.base import CommandContext, CommandHandler, CommandSpec
from command_router.actions.builtin import get_builtin_commands
from command_router.actions.result import ActionResult
from command_router.util.command_parser import CommandParser
from command_router.util.logging import Logger


class ActionRegistry:
    """Command table shared by every host interface"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ActionRegistry, cls).__new__(cls)
        return cls._instance

    def initialize(self):
        """Initialize the registry if not already initialized"""
        if self._initialized:
            return

        self.logger = Logger("ActionRegistry")
        self.commands: Dict[str, Tuple[CommandHandler, CommandSpec]] = {}
        self._initialized = True

        self.logger.info("Initializing command registry")

        for spec, handler in get_builtin_commands(self):
            self.register_command(
                spec.name,
                spec.description,
                handler,
                accepts_args=spec.accepts_args,
                require_auth=spec.require_auth,
                help_text=spec.help_text,
            )

    def register_command(
        self,
        name: str,
        description: str,
        handler: CommandHandler,
        accepts_args: bool = True,
        require_auth: bool = True,
        help_text: str = "",
    ) -> None:
        """Register a handler under a command name. A later registration replaces an earlier one."""
        self.initialize()

        if not name:
            raise ValueError("Command name must not be empty")
        if not callable(handler):
            raise TypeError(f"Handler for /{name} is not callable")

        if name in self.commands:
            self.logger.warning(f"Replacing existing command: /{name}")

        spec = CommandSpec(
            name=name,
            description=description,
            accepts_args=accepts_args,
            require_auth=require_auth,
            help_text=help_text,
        )
        self.commands[name] = (handler, spec)
        self.logger.debug(f"Registered command: /{name}")

    def unregister_command(self, name: str) -> bool:
        """Remove a command, returning whether it existed"""
        self.initialize()
        return self.commands.pop(name, None) is not None

    def get_command(self, name: str) -> Optional[Tuple[CommandHandler, CommandSpec]]:
        """Get a command by name"""
        self.initialize()
        return self.commands.get(name)

    def get_commands(self) -> Dict[str, Tuple[CommandHandler, CommandSpec]]:
        """Get all registered commands"""
        self.initialize()
        return self.commands

    def resolve_name(self, name: str) -> str:
        """Map a typed command name onto a registered one.

        Exact matches win. Otherwise a single case-insensitive match is used,
        since chat clients lowercase commands picked from their menus.
        """
        commands = self.get_commands()
        if name in commands:
            return name
        matches = [registered for registered in commands if registered.lower() == name.lower()]
        return matches[0] if len(matches) == 1 else name

    async def execute(self, text: str, context: Optional[CommandContext] = None) -> Optional[ActionResult]:
        """Run the command contained in ``text``.

        Returns None when ``text`` is not a registered command so the caller can
        fall through to its own handling.
        """
        if not CommandParser.is_command(text):
            return None

        name, args_str = CommandParser.parse_command(text)
        command = self.get_command(self.resolve_name(name))
        if not command:
            return None

        handler, spec = command
        context = context or CommandContext()

        if spec.require_auth and not context.authorized:
            self.logger.warning(f"Unauthorized call to /{name}", extra_data={"sender": context.sender_id})
            return ActionResult.failure("Not authorized")

        context.args = args_str if spec.accepts_args else None
        return await handler(context)
