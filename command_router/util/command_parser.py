"""Slash command parsing shared by all hosts"""

from typing import Optional, Tuple


class CommandParser:
    """Splits raw chat text into a command name and its argument text"""

    @staticmethod
    def is_command(text: Optional[str]) -> bool:
        return bool(text) and text.lstrip().startswith("/")

    @staticmethod
    def parse_command(message: str) -> Tuple[str, str]:
        """Parse a command message into command name and raw argument string.

        Args:
            message: The full command message (e.g. "/GE what changed today?")

        Returns:
            Tuple of (command_name, raw_args_string). The argument string is kept
            verbatim apart from the separator so quotes and newlines reach the
            handler untouched.
        """
        message = message.lstrip().lstrip("/")
        parts = message.split(None, 1)
        command = parts[0] if parts else ""

        # Telegram appends the bot username in groups: /GE@my_bot hello
        if "@" in command:
            command = command.split("@", 1)[0]

        args_str = parts[1] if len(parts) > 1 else ""
        return command, args_str
