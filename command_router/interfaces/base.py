from abc import ABC, abstractmethod


class Interface(ABC):
    """Base class for all hosts that deliver commands to the registry"""

    @abstractmethod
    async def start(self) -> None:
        """Start the interface"""

    @abstractmethod
    async def stop(self) -> None:
        """Stop the interface"""

    @abstractmethod
    async def handle_message(self, content: str, session_id: str) -> None:
        """Handle an incoming message"""

    @abstractmethod
    async def send_message(self, content: str, session_id: str) -> None:
        """Send a message"""
