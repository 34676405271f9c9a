"""
Command Executor Service.

Runs external commands (kubectl) asynchronously with a timeout and captures
their output.
"""

import asyncio
import contextlib
import os
import time
from dataclasses import dataclass
from pathlib import Path

from kubeweave.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Result of a command execution."""
    command: str
    exit_code: int
    stdout: str
    stderr: str
    duration: float
    is_timeout: bool = False

    @property
    def is_success(self) -> bool:
        """Check if command succeeded."""
        return self.exit_code == 0 and not self.is_timeout


class CommandExecutor:
    """
    Thin asyncio subprocess wrapper.

    Never runs through a shell: arguments are passed straight to exec.
    """

    def __init__(self, default_timeout: float = 300.0):
        self.default_timeout = default_timeout

    async def run_async(
        self,
        args: list[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """
        Execute a command asynchronously.

        Args:
            args: Program followed by its arguments
            cwd: Working directory
            timeout: Execution timeout in seconds

        Returns:
            CommandResult object. Spawn failures are reported as exit code -2.
        """
        start_time = time.perf_counter()
        timeout_val = timeout if timeout is not None else self.default_timeout
        cmd_str = " ".join(args)
        logger.debug("executing_command", command=cmd_str, cwd=str(cwd) if cwd else "cwd", timeout=timeout_val)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=os.environ.copy(),
            )
        except OSError as e:
            logger.error("command_execution_error", command=cmd_str, error=str(e))
            return CommandResult(
                command=cmd_str,
                exit_code=-2,
                stdout="",
                stderr=f"Execution error: {e!s}",
                duration=time.perf_counter() - start_time,
            )

        try:
            stdout_data, stderr_data = await asyncio.wait_for(process.communicate(), timeout=timeout_val)
        except asyncio.TimeoutError:
            logger.warning("command_timeout", command=cmd_str, timeout=timeout_val)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            return CommandResult(
                command=cmd_str,
                exit_code=-1,
                stdout="",
                stderr="Command timed out",
                duration=time.perf_counter() - start_time,
                is_timeout=True,
            )

        duration = time.perf_counter() - start_time
        stdout_str = stdout_data.decode("utf-8", errors="replace")
        stderr_str = stderr_data.decode("utf-8", errors="replace")

        if process.returncode != 0:
            logger.warning(
                "command_failed",
                command=cmd_str,
                exit_code=process.returncode,
                stderr_snippet=stderr_str[:200],
            )
        else:
            logger.debug("command_success", command=cmd_str, duration=duration)

        return CommandResult(
            command=cmd_str,
            exit_code=process.returncode,
            stdout=stdout_str,
            stderr=stderr_str,
            duration=duration,
        )
