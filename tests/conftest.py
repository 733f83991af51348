# tests/conftest.py
"""
Common test fixtures for shellbridge.
"""
import asyncio
from typing import Dict, List, Optional

import pytest

from shellbridge.config import TerminalConfig
from shellbridge.execution.models import ProcessOutput
from shellbridge.orchestrator import CommandOrchestrator
from shellbridge.shell.dialects import ShellDialect


class FakeExecutor:
    """Stands in for the process executor and records what it was asked to run."""

    def __init__(self, outputs: Optional[Dict[str, ProcessOutput]] = None, delay: float = 0.0):
        self.outputs = outputs or {}
        self.delay = delay
        self.commands: List[str] = []
        self.active = 0
        self.max_active = 0
        self.terminated = False

    async def execute(self, command: str) -> ProcessOutput:
        self.commands.append(command)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return self.outputs.get(command, ProcessOutput(stdout=f"ran: {command}\n", exit_code=0))
        finally:
            self.active -= 1

    def terminate(self) -> bool:
        self.terminated = True
        return True


@pytest.fixture
def sh_config(tmp_path):
    """Configuration that runs commands with /bin/sh in a temporary directory."""
    return TerminalConfig(
        shell_path="/bin/sh",
        working_directory=tmp_path,
        timeout=10,
        target_dialect=ShellDialect.SH,
    )


@pytest.fixture
def zsh_config(tmp_path):
    """Configuration that adapts for zsh; pair it with a fake executor."""
    return TerminalConfig(
        shell_path="/bin/zsh",
        working_directory=tmp_path,
        timeout=10,
        target_dialect=ShellDialect.ZSH,
    )


@pytest.fixture
def fake_executor():
    """Returns a FakeExecutor instance."""
    return FakeExecutor()


@pytest.fixture
def orchestrator(zsh_config, fake_executor):
    """Orchestrator that adapts for zsh but never spawns a process."""
    return CommandOrchestrator(zsh_config, executor=fake_executor)


@pytest.fixture
def executor_factory():
    """Builds FakeExecutors with canned outputs."""
    return FakeExecutor
