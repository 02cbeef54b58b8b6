"""Runs external agent processes and normalises their outcome.

Every call spawns one fresh shell process. Failures of any kind (non-zero
exit, spawn errors, the enforced ceiling elapsing) are returned as an
``InvocationResult`` instead of being raised.
"""

import asyncio
import os
import signal
from dataclasses import dataclass, field
from typing import List, Optional

from command_router.util.logging import Logger

# Added on top of the timeout handed to the agent CLI itself
CEILING_MARGIN_SECS = 10


def escape_message(message: str) -> str:
    """Escape double quotes and backticks for use inside a double-quoted shell word.

    Only these two characters are escaped. ``$()``, ``;`` and newlines are left
    alone, matching what agent CLIs configured against this router expect.
    """
    return message.replace('"', '\\"').replace("`", "\\`")


def quote_message(message: str) -> str:
    return f'"{escape_message(message)}"'


def enforced_timeout_ms(timeout_secs: int) -> int:
    """Ceiling applied around a call whose agent-level timeout is ``timeout_secs``"""
    return (timeout_secs + CEILING_MARGIN_SECS) * 1000


@dataclass(frozen=True)
class InvocationRequest:
    executable: str
    arguments: List[str] = field(default_factory=list)
    timeout_ms: int = enforced_timeout_ms(120)

    @property
    def command_line(self) -> str:
        return " ".join([self.executable, *self.arguments])


@dataclass(frozen=True)
class InvocationResult:
    output: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.output is None) == (self.error is None):
            raise ValueError("InvocationResult needs exactly one of output or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @staticmethod
    def success(output: str) -> "InvocationResult":
        return InvocationResult(output=output)

    @staticmethod
    def failure(message: str) -> "InvocationResult":
        return InvocationResult(error=message)


class InvocationExecutor:
    """Spawns a shell process per request and waits for it under a ceiling"""

    def __init__(self):
        self.logger = Logger("InvocationExecutor")

    async def invoke(self, request: InvocationRequest) -> InvocationResult:
        command_line = request.command_line

        if request.timeout_ms <= 0:
            return InvocationResult.failure(f"Invalid timeout {request.timeout_ms}ms for: {command_line}")

        try:
            process = await asyncio.create_subprocess_shell(
                command_line,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            self.logger.error(f"Failed to spawn process: {e}")
            return InvocationResult.failure(str(e))

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=request.timeout_ms / 1000)
        except asyncio.TimeoutError:
            await self._kill(process)
            return InvocationResult.failure(f"Command timed out after {request.timeout_ms / 1000:g}s: {command_line}")
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        if process.returncode != 0:
            error_output = _decode(stderr).strip()
            message = f"Command failed: {command_line}"
            if error_output:
                message = f"{message}\n{error_output}"
            return InvocationResult.failure(message)

        return InvocationResult.success(_decode(stdout).strip())

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        """Terminate the process group started for a request and reap it.

        The group is signalled even when the shell already exited, since
        background children can outlive it while holding the output pipes.
        """
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except OSError:
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
        if process.returncode is None:
            await process.wait()


def _decode(data: Optional[bytes]) -> str:
    return data.decode("utf-8", errors="replace") if data else ""
