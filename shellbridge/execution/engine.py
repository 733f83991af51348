# shellbridge/execution/engine.py
"""
Process execution for shellbridge.

Commands run as ``<shell> -c <command>`` in their own process group. Waiting
for the process and the timeout timer are two separate tasks racing each
other, so termination can be requested as soon as the deadline passes.
"""
import asyncio
import os
import signal
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

from shellbridge.constants import DEFAULT_TIMEOUT, SHELL_COMMAND_FLAG, TERMINATE_GRACE_PERIOD
from shellbridge.execution.errors import CommandSpawnError, CommandTimeoutError
from shellbridge.execution.models import ProcessOutput
from shellbridge.utils.logging import get_logger

if TYPE_CHECKING:
    from shellbridge.config import TerminalConfig

logger = get_logger(__name__)

_HAS_PROCESS_GROUPS = hasattr(os, "killpg")
_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _signal_process(process: asyncio.subprocess.Process, sig: int) -> None:
    """Send a signal to the process group (or the process where groups are unavailable)."""
    try:
        if _HAS_PROCESS_GROUPS:
            # start_new_session makes the shell the leader of its own group
            os.killpg(process.pid, sig)
        elif process.returncode is None:
            process.terminate()
    except (ProcessLookupError, PermissionError) as e:
        logger.debug(f"Could not signal process {process.pid}: {e}")


class ProcessExecutor:
    """Spawns a shell for a command and collects its output."""

    def __init__(
        self,
        shell_path: str,
        working_directory: Optional[Path] = None,
        environment: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        capture_output: bool = True,
    ):
        self.shell_path = shell_path
        self.working_directory = working_directory
        self.environment = environment
        self.timeout = timeout
        self.capture_output = capture_output
        self._process: Optional[asyncio.subprocess.Process] = None
        self._logger = logger

    @classmethod
    def from_config(cls, config: "TerminalConfig") -> "ProcessExecutor":
        return cls(
            shell_path=config.shell_path,
            working_directory=config.working_directory,
            environment=config.environment,
            timeout=config.timeout,
            capture_output=config.capture_output,
        )

    async def execute(self, command: str) -> ProcessOutput:
        """
        Execute a command in the configured shell and wait for it to finish.

        Args:
            command: The shell command to execute.

        Returns:
            The decoded stdout, stderr and exit code.

        Raises:
            CommandSpawnError: If the shell could not be started.
            CommandTimeoutError: If the command did not exit before the timeout.
        """
        self._logger.info(f"Executing command: {command}")
        pipe = asyncio.subprocess.PIPE if self.capture_output else None

        try:
            process = await asyncio.create_subprocess_exec(
                self.shell_path,
                SHELL_COMMAND_FLAG,
                command,
                stdout=pipe,
                stderr=pipe,
                cwd=str(self.working_directory) if self.working_directory else None,
                env=self.environment,
                start_new_session=_HAS_PROCESS_GROUPS,
            )
        except OSError as e:
            self._logger.error(f"Error starting '{self.shell_path}' for command '{command}': {e}")
            raise CommandSpawnError(command, str(e)) from e

        self._process = process
        communicate = asyncio.ensure_future(process.communicate())
        timer = asyncio.ensure_future(asyncio.sleep(self.timeout))

        try:
            done, _ = await asyncio.wait({communicate, timer}, return_when=asyncio.FIRST_COMPLETED)

            if communicate not in done:
                self._logger.warning(f"Command exceeded {self.timeout:g}s timeout, terminating: {command}")
                await self._stop(process, communicate, signal.SIGTERM)
                raise CommandTimeoutError(command, self.timeout)

            stdout_bytes, stderr_bytes = communicate.result()

        except asyncio.CancelledError:
            self._logger.warning(f"Execution cancelled, killing command: {command}")
            await self._stop(process, communicate, _KILL_SIGNAL)
            raise

        finally:
            timer.cancel()
            self._process = None

        output = ProcessOutput(
            stdout=_decode(stdout_bytes),
            stderr=_decode(stderr_bytes),
            exit_code=process.returncode,
        )

        self._logger.debug(f"Command completed with return code: {output.exit_code}")
        self._logger.debug(f"stdout: {output.stdout[:100]}{'...' if len(output.stdout) > 100 else ''}")
        if output.stderr:
            self._logger.debug(f"stderr: {output.stderr}")

        return output

    @property
    def is_running(self) -> bool:
        return self._process is not None

    def terminate(self) -> bool:
        """
        Request termination of the in-flight command, if any.

        Returns:
            True if a termination signal was sent.
        """
        if self._process is None:
            return False
        self._logger.info(f"Terminating process {self._process.pid} on request")
        _signal_process(self._process, signal.SIGTERM)
        return True

    async def _stop(
        self,
        process: asyncio.subprocess.Process,
        communicate: "asyncio.Future",
        sig: int,
    ) -> None:
        """
        Ask the process to stop and drain its pipes.

        Escalates to a kill if the pipes are still open after the grace period.
        The pipes are abandoned, not awaited forever, if even that fails.
        """
        _signal_process(process, sig)
        await asyncio.wait({communicate}, timeout=TERMINATE_GRACE_PERIOD)

        if not communicate.done() and sig != _KILL_SIGNAL:
            _signal_process(process, _KILL_SIGNAL)
            await asyncio.wait({communicate}, timeout=TERMINATE_GRACE_PERIOD)

        if not communicate.done():
            self._logger.error(f"Process {process.pid} did not release its output pipes")
            communicate.cancel()
        elif not communicate.cancelled() and communicate.exception() is not None:
            self._logger.debug(f"Error draining process {process.pid}: {communicate.exception()}")
