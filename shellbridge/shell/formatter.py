# shellbridge/shell/formatter.py
"""
Rich terminal rendering of shellbridge results.
"""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shellbridge.execution.models import CommandResult
from shellbridge.safety.models import RiskLevel, SanitizationResult
from shellbridge.shell.models import AdaptedCommand

RISK_STYLES = {
    RiskLevel.SAFE: "green",
    RiskLevel.LOW: "blue",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold bright_red",
}


class TerminalFormatter:
    """Renders command results, adaptations and risk verdicts."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        return self._console

    def print_command_result(self, result: CommandResult) -> None:
        """
        Display a command result: adaptation info, warnings, output and status.

        Args:
            result: The result to display
        """
        if result.was_adapted:
            self._console.print(Panel(
                f"[dim]Original:[/dim] {escape(result.command)}\n"
                f"[dim]Adapted:[/dim]  {escape(result.adapted_command or result.command)}",
                title="Command Adapted",
                border_style="yellow",
                expand=False,
            ))
            for change in result.adaptation_changes:
                self._console.print(f"  [yellow]•[/yellow] {escape(change.description)}")
            self._console.print("")

        for warning in result.sanitization_warnings:
            self._console.print(f"[yellow]⚠ {escape(warning)}[/yellow]")

        if result.stdout:
            self._console.print(result.stdout, end="" if result.stdout.endswith("\n") else "\n",
                                markup=False, highlight=False)

        if result.stderr:
            self._console.print(f"[red]{escape(result.stderr)}[/red]",
                                end="" if result.stderr.endswith("\n") else "\n")

        if result.succeeded:
            self._console.print(f"[dim]✓ Exit code: 0 ({result.duration:.2f}s)[/dim]")
        else:
            self._console.print(f"[red]✗ Exit code: {result.exit_code} ({result.duration:.2f}s)[/red]")

    def print_adaptation(self, adapted: AdaptedCommand) -> None:
        """Display an adapted command next to the original."""
        table = Table(title=f"Adaptation for {adapted.target_dialect.value}", expand=False)
        table.add_column("Original", style="red")
        table.add_column("Adapted", style="green")
        table.add_column("Changes")

        changes = ", ".join(change.type.value for change in adapted.changes) or "None needed"
        table.add_row(escape(adapted.original), escape(adapted.adapted), changes)
        self._console.print(table)

        if adapted.changes:
            self._console.print(escape(adapted.description))

    def print_sanitization(self, command: str, result: SanitizationResult) -> None:
        """Display the risk verdict for a command."""
        style = RISK_STYLES[result.risk_level]

        table = Table(title="Command Safety Analysis", expand=False)
        table.add_column("Command")
        table.add_column("Risk Level")
        table.add_column("Warnings")
        table.add_column("Allowed")

        table.add_row(
            escape(command),
            f"[{style}]{result.risk_level.label}[/{style}]",
            escape("; ".join(result.warnings)) if result.warnings else "-",
            "[green]✓[/green]" if result.is_allowed else "[red]✗[/red]",
        )
        self._console.print(table)

        if result.blocked_reason:
            self._console.print(f"[bold red]Blocked:[/bold red] {escape(result.blocked_reason)}")

    def print_error(self, message: str) -> None:
        self._console.print(f"[bold red]Error:[/bold red] {escape(message)}")


terminal_formatter = TerminalFormatter()
