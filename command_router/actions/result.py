"""Command result types and formatting"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ResultType(Enum):
    """Types of command results"""

    TEXT = "text"  # Simple text message
    ERROR = "error"  # Error message


@dataclass
class ActionResult:
    """Response produced by a command handler"""

    type: ResultType
    content: str
    error: Optional[str] = None

    def __str__(self) -> str:
        """Response text as delivered to the user"""
        if self.type == ResultType.ERROR:
            return f"Error: {self.error}"
        return str(self.content)

    @property
    def is_error(self) -> bool:
        return self.type == ResultType.ERROR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "type": self.type.value,
            "text": str(self),
            "error": self.error,
        }

    @staticmethod
    def text(content: str) -> "ActionResult":
        """Create a text result"""
        return ActionResult(type=ResultType.TEXT, content=content)

    @staticmethod
    def failure(message: str) -> "ActionResult":
        """Create an error result"""
        return ActionResult(type=ResultType.ERROR, content=message, error=message)
