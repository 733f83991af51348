# tests/test_orchestration.py
"""
Tests for the command orchestrator.
"""
import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from shellbridge.execution.errors import CommandBlockedError, CommandFailedError, RiskTooHighError
from shellbridge.execution.models import ProcessOutput
from shellbridge.orchestrator import CommandOrchestrator, run_command
from shellbridge.safety.models import RiskLevel
from shellbridge.shell.models import ChangeType


@pytest.mark.asyncio
async def test_run_simple_command(orchestrator, fake_executor):
    result = await orchestrator.run("ls -la")

    assert fake_executor.commands == ["ls -la"]
    assert result.command == "ls -la"
    assert result.adapted_command is None
    assert not result.was_adapted
    assert result.exit_code == 0
    assert result.stdout == "ran: ls -la\n"
    assert result.duration >= 0


@pytest.mark.asyncio
async def test_run_executes_adapted_command(orchestrator, fake_executor):
    result = await orchestrator.run('echo -e "a\\tb"')

    assert fake_executor.commands == ['echo "a\\tb"']
    assert result.was_adapted
    assert result.adapted_command == 'echo "a\\tb"'
    assert [change.type for change in result.adaptation_changes] == [ChangeType.ECHO_ESCAPE]


@pytest.mark.asyncio
async def test_blocked_command_never_executes(orchestrator, fake_executor):
    with pytest.raises(CommandBlockedError) as excinfo:
        await orchestrator.run("rm -rf /")

    assert excinfo.value.reason == "Attempted to delete root filesystem"
    assert str(excinfo.value) == "Command blocked: Attempted to delete root filesystem"
    assert fake_executor.commands == []
    assert orchestrator.history() == []


@pytest.mark.asyncio
async def test_risk_above_ceiling_is_rejected(zsh_config, fake_executor):
    config = zsh_config.with_overrides(max_risk_level=RiskLevel.LOW)
    orchestrator = CommandOrchestrator(config, executor=fake_executor)

    with pytest.raises(RiskTooHighError) as excinfo:
        await orchestrator.run("rm notes.txt")

    assert excinfo.value.level == RiskLevel.MEDIUM
    assert str(excinfo.value) == "Command risk level (medium) exceeds maximum allowed (low)"
    assert fake_executor.commands == []


@pytest.mark.asyncio
async def test_risk_at_ceiling_runs_with_warnings(orchestrator, fake_executor):
    result = await orchestrator.run("rm -rf build")

    assert fake_executor.commands == ["rm -rf build"]
    assert result.sanitization_warnings == ["Recursive force deletion", "File deletion"]


@pytest.mark.asyncio
async def test_sanitize_disabled_skips_classifier(zsh_config, fake_executor):
    config = zsh_config.with_overrides(sanitize_commands=False)
    orchestrator = CommandOrchestrator(config, executor=fake_executor)

    result = await orchestrator.run("rm -rf /")

    assert fake_executor.commands == ["rm -rf /"]
    assert result.sanitization_warnings == []


@pytest.mark.asyncio
async def test_adapt_disabled_runs_original(zsh_config, fake_executor):
    config = zsh_config.with_overrides(adapt_commands=False)
    orchestrator = CommandOrchestrator(config, executor=fake_executor)

    result = await orchestrator.run("echo `date`")

    assert fake_executor.commands == ["echo `date`"]
    assert not result.was_adapted
    assert result.adaptation_changes == []


@pytest.mark.asyncio
async def test_non_zero_exit_is_reported_not_raised(zsh_config, executor_factory):
    executor = executor_factory({"false": ProcessOutput(stderr="nope", exit_code=1)})
    orchestrator = CommandOrchestrator(zsh_config, executor=executor)

    result = await orchestrator.run("false")

    assert result.exit_code == 1
    assert not result.succeeded
    assert orchestrator.last_result() == result


@pytest.mark.asyncio
async def test_history_keeps_execution_order(orchestrator):
    await orchestrator.run("echo one")
    await orchestrator.run("echo two")

    assert [result.command for result in orchestrator.history()] == ["echo one", "echo two"]
    assert orchestrator.last_result().command == "echo two"

    orchestrator.clear_history()
    assert orchestrator.history() == []
    assert orchestrator.last_result() is None


@pytest.mark.asyncio
async def test_history_returns_a_copy(orchestrator):
    await orchestrator.run("echo one")

    orchestrator.history().clear()

    assert len(orchestrator.history()) == 1


@pytest.mark.asyncio
async def test_history_limit_drops_oldest(zsh_config, fake_executor):
    config = zsh_config.with_overrides(history_limit=2)
    orchestrator = CommandOrchestrator(config, executor=fake_executor)

    for command in ("echo 1", "echo 2", "echo 3"):
        await orchestrator.run(command)

    assert [result.command for result in orchestrator.history()] == ["echo 2", "echo 3"]


@pytest.mark.asyncio
async def test_run_sequence_stops_on_error(zsh_config, executor_factory):
    executor = executor_factory({"false": ProcessOutput(exit_code=1)})
    orchestrator = CommandOrchestrator(zsh_config, executor=executor)

    results = await orchestrator.run_sequence(["echo a", "false", "echo b"])

    assert [result.command for result in results] == ["echo a", "false"]
    assert executor.commands == ["echo a", "false"]


@pytest.mark.asyncio
async def test_run_sequence_can_continue_after_error(zsh_config, executor_factory):
    executor = executor_factory({"false": ProcessOutput(exit_code=1)})
    orchestrator = CommandOrchestrator(zsh_config, executor=executor)

    results = await orchestrator.run_sequence(["echo a", "false", "echo b"], stop_on_error=False)

    assert [result.exit_code for result in results] == [0, 1, 0]


@pytest.mark.asyncio
async def test_run_sequence_propagates_refusal(orchestrator, fake_executor):
    with pytest.raises(CommandBlockedError):
        await orchestrator.run_sequence(["echo a", "rm -rf /", "echo b"])

    assert fake_executor.commands == ["echo a"]


@pytest.mark.asyncio
async def test_output_returns_trimmed_stdout(orchestrator):
    assert await orchestrator.output("echo hi") == "ran: echo hi"


@pytest.mark.asyncio
async def test_output_raises_on_failure(zsh_config, executor_factory):
    executor = executor_factory({"false": ProcessOutput(stderr="bad things", exit_code=2)})
    orchestrator = CommandOrchestrator(zsh_config, executor=executor)

    with pytest.raises(CommandFailedError) as excinfo:
        await orchestrator.output("false")

    assert excinfo.value.exit_code == 2
    assert excinfo.value.stderr == "bad things"


@pytest.mark.asyncio
async def test_concurrent_runs_are_serialized(zsh_config, executor_factory):
    executor = executor_factory(delay=0.05)
    orchestrator = CommandOrchestrator(zsh_config, executor=executor)

    await asyncio.gather(*(orchestrator.run(f"echo {i}") for i in range(4)))

    assert executor.max_active == 1
    assert [result.command for result in orchestrator.history()] == executor.commands


@pytest.mark.asyncio
async def test_terminate_delegates_to_executor(orchestrator, fake_executor):
    assert orchestrator.terminate() is True
    assert fake_executor.terminated


@pytest.mark.asyncio
async def test_real_shell_end_to_end(sh_config):
    orchestrator = CommandOrchestrator(sh_config)

    result = await orchestrator.run("echo hello && echo warn >&2")

    assert result.stdout == "hello\n"
    assert result.stderr == "warn\n"
    assert result.succeeded

    payload = json.loads(result.to_json())
    assert payload["command"] == "echo hello && echo warn >&2"
    assert payload["adapted_command"] is None
    assert payload["success"] is True


def test_run_command_sync_wrapper(sh_config):
    result = run_command("echo sync", sh_config)

    assert result.stdout == "sync\n"
    assert result.exit_code == 0


@pytest.mark.asyncio
async def test_executor_receives_adapted_text(sh_config):
    config = sh_config.with_overrides(target_dialect="zsh")
    orchestrator = CommandOrchestrator(config)

    with patch.object(orchestrator._executor, "execute", new=AsyncMock()) as mock_execute:
        mock_execute.return_value = ProcessOutput(stdout="x\n", exit_code=0)
        result = await orchestrator.run("echo -e `whoami`")

    mock_execute.assert_awaited_once_with("echo $(whoami)")
    assert result.adapted_command == "echo $(whoami)"
    assert len(result.adaptation_changes) == 2
