# shellbridge/execution/__init__.py
"""
Command execution for shellbridge.

This package spawns shell processes with a timeout and defines the structured
result and error types produced by the orchestrator.
"""
from .errors import (
    TerminalError,
    CommandBlockedError,
    RiskTooHighError,
    CommandFailedError,
    CommandTimeoutError,
    CommandSpawnError,
)
from .models import ProcessOutput, CommandResult
from .engine import ProcessExecutor

__all__ = [
    'TerminalError',
    'CommandBlockedError',
    'RiskTooHighError',
    'CommandFailedError',
    'CommandTimeoutError',
    'CommandSpawnError',
    'ProcessOutput',
    'CommandResult',
    'ProcessExecutor',
]
