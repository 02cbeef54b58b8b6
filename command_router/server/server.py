import asyncio
from typing import List

from command_router.actions.registry import ActionRegistry
from command_router.config.config import Config
from command_router.interfaces.base import Interface
from command_router.routing.registrar import load_router_commands
from command_router.util.logging import Logger
from command_router.webhooks.server import CommandServer


class Server:
    """Main server class that coordinates all components"""

    @classmethod
    async def run(cls) -> None:
        """Run the server until cancelled"""
        logger = Logger("Server")
        config = Config()
        registry = ActionRegistry()
        command_server = None
        interfaces: List[Interface] = []

        try:
            print("Starting server...")  # Direct console output
            logger.info("Starting server initialization...")

            load_router_commands(registry, config)

            if config.webhook_enabled:
                logger.info("Starting command server...")
                command_server = CommandServer(registry, token=config.webhook_token)
                await command_server.start(config.webhook_port)
            else:
                logger.info("Command server disabled in config")

            if config.telegram_token:
                # Imported lazily so the HTTP host works without a bot configured
                from command_router.interfaces.telegram import TelegramInterface

                logger.info("Starting Telegram interface...")
                telegram = TelegramInterface(registry, config)
                await telegram.start()
                interfaces.append(telegram)
            else:
                logger.info("Telegram bot token not configured, skipping Telegram interface")

            if command_server is None and not interfaces:
                logger.warning("No host interface enabled, commands can only be run from the CLI")

            logger.info("Server started successfully")
            print("Server is running...")  # Direct console output

            try:
                while True:
                    await asyncio.sleep(1)
            except asyncio.CancelledError:
                logger.info("Server shutdown initiated")
                raise

        except Exception as e:
            logger.error(f"Server error: {str(e)}")
            print(f"Server error: {str(e)}")  # Direct console output
            raise

        finally:
            logger.info("Cleaning up server resources...")

            for interface in interfaces:
                try:
                    await interface.stop()
                except Exception as e:
                    logger.error(f"Error stopping interface: {e}")

            if command_server is not None:
                try:
                    await command_server.stop()
                except Exception as e:
                    logger.error(f"Error stopping command server: {e}")

            logger.info("Server shutdown complete")
            print("Server shutdown complete")  # Direct console output
