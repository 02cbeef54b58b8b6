from typing import TYPE_CHECKING

from command_router.actions.base import CommandContext, CommandHandler, CommandSpec
from command_router.actions.result import ActionResult

if TYPE_CHECKING:
    from command_router.actions.registry import ActionRegistry


HELP_SPEC = CommandSpec(
    name="help",
    description="Show help information about commands",
    accepts_args=True,
    require_auth=False,
    help_text="""Get help information about available commands.

Usage:
/help [command]

Without arguments, shows a list of all available commands.
With a command name, shows detailed help for that command.

Examples:
/help  # List all commands
/help GE  # Show help for the GE command""",
)


def create_help_handler(registry: "ActionRegistry") -> CommandHandler:
    """Build the /help handler bound to a registry"""

    async def handler(ctx: CommandContext) -> ActionResult:
        command = (ctx.args or "").strip().lstrip("/")

        if command:
            entry = registry.get_command(command)
            if not entry:
                return ActionResult.text(f"Command '{command}' not found")

            spec = entry[1]
            lines = [
                f"Command: /{spec.name}",
                f"Description: {spec.description}",
            ]
            if spec.accepts_args:
                lines.append(f"Usage: /{spec.name} <message>")
            if spec.help_text:
                lines.extend(["", spec.help_text])
            return ActionResult.text("\n".join(lines))

        lines = ["Available Commands:"]
        for name, (_, spec) in sorted(registry.get_commands().items()):
            lines.append(f"  • /{name}: {spec.description}")

        lines.append("\nUse /help <command> for detailed information about a specific command.")
        return ActionResult.text("\n".join(lines))

    return handler
