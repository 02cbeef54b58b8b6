import re
from typing import List, Optional

from telegram import BotCommand, Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from command_router.actions.base import CommandContext
from command_router.actions.registry import ActionRegistry
from command_router.config.config import Config
from command_router.interfaces.base import Interface
from command_router.util.logging import Logger

# Telegram only accepts lowercase names in the published command menu
_BOT_COMMAND_NAME = re.compile(r"^[a-z0-9_]{1,32}$")


def split_message(content: str, limit: int) -> List[str]:
    """Split text into chunks no longer than ``limit``, preferring line breaks"""
    if len(content) <= limit:
        return [content]

    chunks = []
    remaining = content
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(remaining[:cut])
        remaining = remaining[cut:].lstrip("\n")
    if remaining:
        chunks.append(remaining)
    return chunks


class TelegramInterface(Interface):
    """Telegram bot host. Every slash command is routed through the registry."""

    MAX_MESSAGE_LENGTH = 4096  # Telegram's message length limit

    def __init__(self, action_registry: ActionRegistry, config: Optional[Config] = None):
        super().__init__()
        self.logger = Logger("TelegramInterface")
        self.action_registry = action_registry
        self.config = config or Config()
        self.app = None
        self._initialized = False

    def is_authorized(self, chat_id: str) -> bool:
        allowed = self.config.telegram_chat_id
        return bool(allowed) and chat_id == allowed

    async def start(self) -> None:
        """Start the Telegram bot"""
        if self._initialized:
            self.logger.warning("Telegram interface already initialized")
            return

        token = self.config.telegram_token
        if not token:
            raise ValueError("Telegram bot token not configured")

        if not self.config.telegram_chat_id:
            self.logger.warning("No telegram chat_id configured, commands requiring auth will be refused")

        try:
            self.app = Application.builder().token(token).connect_timeout(60).read_timeout(60).write_timeout(60).build()
            self.app.add_handler(MessageHandler(filters.COMMAND, self._handle_update))

            await self.app.initialize()
            await self.app.start()
            await self._register_commands()
            await self.app.updater.start_polling(drop_pending_updates=True, error_callback=self._handle_error)

            self._initialized = True
            self.logger.info("Telegram interface started")

        except Exception as e:
            self.logger.error(f"Failed to start Telegram interface: {e}")
            await self.stop()
            raise

    def bot_commands(self) -> List[BotCommand]:
        """Command menu entries for all registered commands Telegram will accept"""
        commands = []
        for name, (_, spec) in self.action_registry.get_commands().items():
            menu_name = name.lower()
            if not _BOT_COMMAND_NAME.match(menu_name):
                self.logger.warning(f"Command /{name} cannot be listed in the Telegram menu")
                continue

            description = spec.description or "No description available"
            if len(description) > 256:
                description = description[:253] + "..."
            commands.append(BotCommand(menu_name, description))
        return commands

    async def _register_commands(self) -> None:
        """Publish the command menu"""
        try:
            commands = self.bot_commands()
            await self.app.bot.set_my_commands(commands)
            self.logger.info(f"Registered {len(commands)} commands with Telegram")
        except Exception as e:
            self.logger.error(f"Failed to register commands: {e}")

    async def _handle_update(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.message or not update.message.text:
            return
        await self.handle_message(update.message.text, str(update.message.chat_id))

    async def handle_message(self, content: str, session_id: str) -> None:
        """Run a slash command for a chat and reply with its response"""
        context = CommandContext(sender_id=session_id, channel="telegram", authorized=self.is_authorized(session_id))

        try:
            result = await self.action_registry.execute(content, context)
        except Exception as e:
            self.logger.error(f"Error executing command: {e}")
            await self.send_message(f"Error executing command: {e}", session_id)
            return

        if result is None:
            self.logger.debug(f"Ignoring unknown command: {content[:50]}")
            return

        text = str(result)
        if text.strip():
            await self.send_message(text, session_id)

    async def send_message(self, content: str, session_id: str) -> None:
        """Send a message, splitting it at Telegram's length limit"""
        if not self.app or not self.app.bot:
            self.logger.error("Bot not initialized")
            return

        try:
            for chunk in split_message(content, self.MAX_MESSAGE_LENGTH):
                await self.app.bot.send_message(chat_id=session_id, text=chunk)
        except Exception as e:
            self.logger.error(f"Failed to send message: {e}")

    def _handle_error(self, error: Exception) -> None:
        self.logger.error(f"Telegram polling error: {error}")

    async def stop(self) -> None:
        """Stop the interface"""
        self.logger.info("Stopping Telegram interface...")
        if not self.app:
            return

        try:
            if self.app.updater and self.app.updater.running:
                await self.app.updater.stop()
            if self.app.running:
                await self.app.stop()
            await self.app.shutdown()
        except Exception as e:
            self.logger.error(f"Error stopping Telegram interface: {e}")
        finally:
            self.app = None
            self._initialized = False
