# shellbridge/cli/main.py
"""
Main command-line interface for shellbridge.
"""
import asyncio
import json
import sys
from typing import List, Optional

import typer

from shellbridge import __version__
from shellbridge.constants import APP_DESCRIPTION
from shellbridge.config import config_manager
from shellbridge.execution.errors import (
    CommandBlockedError, RiskTooHighError, TerminalError,
)
from shellbridge.orchestrator import CommandOrchestrator
from shellbridge.safety.classifier import CommandSanitizer
from shellbridge.shell.adapter import ShellAdapter
from shellbridge.shell.dialects import ShellDialect
from shellbridge.shell.formatter import terminal_formatter
from shellbridge.utils.logging import setup_logging, get_logger

# Create the app
app = typer.Typer(help=APP_DESCRIPTION)
logger = get_logger(__name__)

# Exit code for commands refused by the safety checks
EXIT_REFUSED = 2

# Let flags of the wrapped command (e.g. "ls -la") pass through as arguments
COMMAND_CONTEXT = {"ignore_unknown_options": True}


def version_callback(value: bool):
    """Display version information and exit."""
    if value:
        typer.echo(f"shellbridge version: {__version__}")
        raise typer.Exit()


def _report_error(command: str, error: Exception, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps({"command": command, "error": str(error)}, indent=2, sort_keys=True))
    else:
        terminal_formatter.print_error(str(error))


@app.callback(help=APP_DESCRIPTION)
def main(
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Enable debug mode"
    ),
    version: bool = typer.Option(
        False, "--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    debug = debug or config_manager.config.debug
    config_manager.config.debug = debug

    setup_logging(debug=debug)


@app.command(context_settings=COMMAND_CONTEXT)
def run(
    command_parts: List[str] = typer.Argument(
        ..., help="The shell command to run."
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the structured result as JSON."
    ),
    no_adapt: bool = typer.Option(
        False, "--no-adapt", help="Run the command without dialect adaptation."
    ),
    no_sanitize: bool = typer.Option(
        False, "--no-sanitize", help="Skip the risk checks."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds before the command is terminated."
    ),
    max_risk: Optional[str] = typer.Option(
        None, "--max-risk", help="Highest risk level allowed (safe, low, medium, high)."
    ),
    shell_path: Optional[str] = typer.Option(
        None, "--shell", help="Shell executable to run the command with."
    ),
):
    """Run a command through sanitize, adapt and execute."""
    command = " ".join(command_parts)

    try:
        config = config_manager.config.terminal.with_overrides(
            timeout=timeout,
            max_risk_level=max_risk,
            shell_path=shell_path,
            adapt_commands=False if no_adapt else None,
            sanitize_commands=False if no_sanitize else None,
        )
    except ValueError as e:
        terminal_formatter.print_error(f"Invalid option: {e}")
        raise typer.Exit(code=1)

    orchestrator = CommandOrchestrator(config)

    try:
        result = asyncio.run(orchestrator.run(command))
    except (CommandBlockedError, RiskTooHighError) as e:
        logger.warning(f"Command refused: {e}")
        _report_error(command, e, as_json)
        raise typer.Exit(code=EXIT_REFUSED)
    except TerminalError as e:
        logger.error(f"Command could not complete: {e}")
        _report_error(command, e, as_json)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(result.to_json())
    else:
        terminal_formatter.print_command_result(result)

    raise typer.Exit(code=result.exit_code if 0 <= result.exit_code < 256 else 1)


@app.command(context_settings=COMMAND_CONTEXT)
def adapt(
    command_parts: List[str] = typer.Argument(
        ..., help="The shell command to adapt."
    ),
    target: Optional[ShellDialect] = typer.Option(
        None, "--target", help="Dialect to adapt for (defaults to the configured shell)."
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the adaptation as JSON."
    ),
):
    """Show how a command would be rewritten for a shell dialect."""
    command = " ".join(command_parts)
    adapter = ShellAdapter(target or config_manager.config.terminal.resolved_dialect)
    adapted = adapter.adapt(command)

    if as_json:
        payload = adapted.model_dump(mode="json")
        payload["was_modified"] = adapted.was_modified
        typer.echo(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        terminal_formatter.print_adaptation(adapted)


@app.command(context_settings=COMMAND_CONTEXT)
def analyze(
    command_parts: List[str] = typer.Argument(
        ..., help="The shell command to analyze."
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the verdict as JSON."
    ),
):
    """Classify the risk of a command without running it."""
    command = " ".join(command_parts)
    result = CommandSanitizer().analyze(command)

    if as_json:
        payload = result.model_dump(mode="json")
        payload["risk_level"] = result.risk_level.label
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        terminal_formatter.print_sanitization(command, result)

    if not result.is_allowed:
        raise typer.Exit(code=EXIT_REFUSED)


@app.command()
def init():
    """Write the current configuration to the config file."""
    try:
        path = config_manager.save_config()
    except OSError as e:
        logger.exception("Error saving configuration")
        terminal_formatter.print_error(f"Could not save configuration: {e}")
        sys.exit(1)

    terminal_formatter.console.print(f"[green]Configuration saved to {path}[/green]")
