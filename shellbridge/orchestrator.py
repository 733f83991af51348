# shellbridge/orchestrator.py
"""
Main orchestration service for shellbridge.

This module coordinates the pipeline for a single command: risk
classification, dialect adaptation, execution with a timeout, and assembly of
the structured result that is appended to the orchestrator's history.
"""
import asyncio
import time
from collections import deque
from typing import Deque, Iterable, List, Optional

from shellbridge.config import TerminalConfig, config_manager
from shellbridge.execution.engine import ProcessExecutor
from shellbridge.execution.errors import CommandBlockedError, CommandFailedError, RiskTooHighError
from shellbridge.execution.models import CommandResult
from shellbridge.safety.classifier import CommandSanitizer
from shellbridge.shell.adapter import ShellAdapter
from shellbridge.shell.models import AdaptationChange
from shellbridge.utils.logging import get_logger

logger = get_logger(__name__)


class CommandOrchestrator:
    """
    Runs commands through sanitize, adapt and execute.

    One orchestrator executes at most one command at a time; concurrent
    ``run`` calls queue on an internal lock so that history order always
    matches execution order. The classifier and adapter are stateless and can
    be shared freely.
    """

    def __init__(
        self,
        config: Optional[TerminalConfig] = None,
        adapter: Optional[ShellAdapter] = None,
        sanitizer: Optional[CommandSanitizer] = None,
        executor: Optional[ProcessExecutor] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Settings for this orchestrator; defaults to the loaded configuration.
            adapter: Dialect adapter; defaults to one targeting the configured dialect.
            sanitizer: Risk classifier; defaults to the standard rule set.
            executor: Process executor; defaults to one built from the config.
        """
        self.config = config or config_manager.config.terminal
        self._adapter = adapter or ShellAdapter(self.config.resolved_dialect)
        self._sanitizer = sanitizer or CommandSanitizer()
        self._executor = executor or ProcessExecutor.from_config(self.config)
        # maxlen=None keeps every result
        self._history: Deque[CommandResult] = deque(maxlen=self.config.history_limit)
        self._lock = asyncio.Lock()
        self._logger = logger

    async def run(self, command: str) -> CommandResult:
        """
        Execute a command with adaptation and sanitization.

        Args:
            command: The shell command to run.

        Returns:
            The structured result. A non-zero exit code is reported in the
            result, not raised.

        Raises:
            CommandBlockedError: The classifier blocked the command.
            RiskTooHighError: The command's risk exceeds ``max_risk_level``.
            CommandTimeoutError: The command did not finish before the timeout.
            CommandSpawnError: The shell could not be started.
        """
        async with self._lock:
            return await self._run_exclusive(command)

    async def _run_exclusive(self, command: str) -> CommandResult:
        started = time.monotonic()
        log = self._logger.with_context(command=command)
        log.info("Received command")

        warnings: List[str] = []
        if self.config.sanitize_commands:
            sanitization = self._sanitizer.analyze(command)
            warnings = list(sanitization.warnings)

            if not sanitization.is_allowed:
                log.warning(f"Command blocked: {sanitization.blocked_reason}")
                raise CommandBlockedError(sanitization.blocked_reason or "Unknown")

            if sanitization.risk_level > self.config.max_risk_level:
                log.warning(
                    f"Command rejected, risk {sanitization.risk_level.label} "
                    f"exceeds {self.config.max_risk_level.label}"
                )
                raise RiskTooHighError(sanitization.risk_level, self.config.max_risk_level)

        executed = command
        changes: List[AdaptationChange] = []
        if self.config.adapt_commands:
            adapted = self._adapter.adapt(command)
            executed = adapted.adapted
            changes = list(adapted.changes)

        process_output = await self._executor.execute(executed)

        was_adapted = executed != command
        result = CommandResult(
            command=command,
            adapted_command=executed if was_adapted else None,
            exit_code=process_output.exit_code,
            stdout=process_output.stdout,
            stderr=process_output.stderr,
            duration=time.monotonic() - started,
            was_adapted=was_adapted,
            adaptation_changes=changes,
            sanitization_warnings=warnings,
        )

        self._history.append(result)
        log.info(
            f"Command finished with exit code {result.exit_code} in {result.duration:.2f}s",
            extra={"was_adapted": was_adapted},
        )
        return result

    async def run_sequence(
        self,
        commands: Iterable[str],
        stop_on_error: bool = True
    ) -> List[CommandResult]:
        """
        Execute multiple commands in order.

        Args:
            commands: The commands to run.
            stop_on_error: Stop after the first result with a non-zero exit code.

        Returns:
            The results of the commands that ran.
        """
        results: List[CommandResult] = []

        for command in commands:
            result = await self.run(command)
            results.append(result)

            if stop_on_error and not result.succeeded:
                self._logger.info(f"Stopping sequence after failed command: {command}")
                break

        return results

    async def output(self, command: str) -> str:
        """
        Execute a command and return just its trimmed stdout.

        Raises:
            CommandFailedError: If the command exits with a non-zero code.
        """
        result = await self.run(command)
        if result.succeeded:
            return result.stdout.strip()
        raise CommandFailedError(result.exit_code, result.stderr)

    def terminate(self) -> bool:
        """Request termination of the command currently executing, if any."""
        return self._executor.terminate()

    # --- History ---

    def history(self) -> List[CommandResult]:
        """Results of completed commands, oldest first."""
        return list(self._history)

    def last_result(self) -> Optional[CommandResult]:
        return self._history[-1] if self._history else None

    def clear_history(self) -> None:
        self._history.clear()


def run_command(command: str, config: Optional[TerminalConfig] = None) -> CommandResult:
    """Synchronous wrapper that runs one command with a fresh orchestrator."""
    return asyncio.run(CommandOrchestrator(config).run(command))
