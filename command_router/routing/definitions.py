"""Parsing of ``command:agent_id:description:timeout_sec`` binding lists"""

import re
from dataclasses import dataclass
from typing import List, Optional

from command_router.util.logging import Logger

DEFAULT_TIMEOUT_SECS = 120

_INT_PREFIX = re.compile(r"^[+-]?\d+")

logger = Logger("command-router")


@dataclass(frozen=True)
class AgentBinding:
    """One slash command routed straight to a sub-agent"""

    command: str
    agent_id: str
    description: str
    timeout_secs: int = DEFAULT_TIMEOUT_SECS


def parse_timeout(value: Optional[str]) -> int:
    """Parse a timeout field, falling back to the default.

    Leading digits are honoured ("300s" is 300). Zero and negative values are
    returned as given.
    """
    match = _INT_PREFIX.match((value or "").strip())
    if not match:
        return DEFAULT_TIMEOUT_SECS
    return int(match.group(0))


def parse_agent_binding(entry: str) -> Optional[AgentBinding]:
    """Parse a single entry, returning None when command or agent id is missing"""
    fields = entry.split(":")
    # Missing trailing fields are absent, anything past the fourth is ignored
    command, agent_id, description, timeout = (fields + [None] * 4)[:4]

    command = (command or "").strip()
    agent_id = (agent_id or "").strip()
    if not command or not agent_id:
        return None

    return AgentBinding(
        command=command,
        agent_id=agent_id,
        description=(description or "").strip() or f"Send to {agent_id} agent",
        timeout_secs=parse_timeout(timeout),
    )


def parse_agent_bindings(raw: Optional[str]) -> List[AgentBinding]:
    """Parse a comma-separated binding list in definition order.

    Malformed entries are skipped, never raised on.
    """
    bindings = []
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue

        binding = parse_agent_binding(entry)
        if binding is None:
            logger.debug(f"Skipping invalid agent definition: {entry!r}")
            continue
        bindings.append(binding)

    return bindings
