# shellbridge/execution/errors.py
"""
Errors raised while running commands through the orchestrator.

None of these are retried automatically; callers decide whether to re-run.
"""
from shellbridge.safety.models import RiskLevel


class TerminalError(Exception):
    """Base class for command orchestration errors."""
    pass


class CommandBlockedError(TerminalError):
    """The risk classifier blocked the command as critical."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Command blocked: {reason}")


class RiskTooHighError(TerminalError):
    """The command is allowed but riskier than the configured ceiling."""

    def __init__(self, level: RiskLevel, max_level: RiskLevel):
        self.level = level
        self.max_level = max_level
        super().__init__(
            f"Command risk level ({level.label}) exceeds maximum allowed ({max_level.label})"
        )


class CommandFailedError(TerminalError):
    """The command ran but exited with a non-zero status."""

    def __init__(self, exit_code: int, stderr: str):
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {exit_code}: {stderr}")


class CommandTimeoutError(TerminalError):
    """The command did not exit before the timeout and was asked to terminate."""

    def __init__(self, command: str, timeout: float):
        self.command = command
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s: {command}")


class CommandSpawnError(TerminalError):
    """The shell process could not be started."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Could not start command '{command}': {reason}")
