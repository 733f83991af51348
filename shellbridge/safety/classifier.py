# shellbridge/safety/classifier.py
"""
Command risk classification for shellbridge.

Commands are checked against three kinds of rules, all matched on the
lower-cased command text:

1. Critical literal patterns. Any match blocks the command immediately.
2. Piped remote script execution (download tool piped into a shell). Any
   match blocks the command immediately.
3. Advisory tiers (high, medium, low). Every matching rule contributes its
   warning and raises the risk level; tiers never cancel each other, so a
   command can collect warnings from several tiers at once.
"""
import re
from typing import Dict, List, Optional, Pattern, Tuple

from shellbridge.safety.models import RiskLevel, SanitizationResult
from shellbridge.utils.logging import get_logger

logger = get_logger(__name__)

# Destructive substrings that are never executed; first match wins, so
# "rm -rf /*" precedes its prefix "rm -rf /"
CRITICAL_PATTERNS: List[Tuple[str, str]] = [
    ("rm -rf /*", "Attempted to delete all files"),
    ("rm -rf /", "Attempted to delete root filesystem"),
    ("rm -rf ~", "Attempted to delete home directory"),
    (":(){:|:&};:", "Fork bomb detected"),
    (":(){ :|:& };:", "Fork bomb detected"),
    ("mkfs.", "Filesystem formatting detected"),
    ("dd if=/dev/zero", "Disk overwrite detected"),
    ("chmod -R 777 /", "Dangerous permission change"),
    ("> /dev/sda", "Direct disk write detected"),
]

# Download tool output piped straight into a shell interpreter
PIPED_SCRIPT_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"curl\s+.+\|\s*sh", re.IGNORECASE), "Piped remote script execution (curl | sh)"),
    (re.compile(r"curl\s+.+\|\s*bash", re.IGNORECASE), "Piped remote script execution (curl | bash)"),
    (re.compile(r"wget\s+.+\|\s*sh", re.IGNORECASE), "Piped remote script execution (wget | sh)"),
    (re.compile(r"wget\s+.+\|\s*bash", re.IGNORECASE), "Piped remote script execution (wget | bash)"),
]

# Advisory rules, evaluated from the highest tier to the lowest
RISK_PATTERNS: Dict[RiskLevel, List[Tuple[str, str]]] = {
    RiskLevel.HIGH: [
        ("sudo rm", "Elevated privilege file deletion"),
        ("sudo chmod", "Elevated privilege permission change"),
        ("sudo chown", "Elevated privilege ownership change"),
        ("> /etc/", "Writing to system config"),
        ("rm -rf", "Recursive force deletion"),
        ("| sh", "Piping to shell"),
        ("| bash", "Piping to shell"),
        ("eval ", "Dynamic code execution"),
        ("$( )", "Command substitution"),
    ],
    RiskLevel.MEDIUM: [
        ("sudo ", "Uses elevated privileges"),
        ("rm ", "File deletion"),
        ("mv ", "File move/rename"),
        ("chmod ", "Permission change"),
        ("chown ", "Ownership change"),
        ("kill ", "Process termination"),
        ("pkill ", "Process termination by name"),
        ("export ", "Environment modification"),
    ],
    RiskLevel.LOW: [
        ("curl ", "Network request"),
        ("wget ", "Network download"),
        ("git push", "Remote repository change"),
        ("npm publish", "Package publication"),
        ("pip install", "Package installation"),
    ],
}


def _blocked(reason: str) -> SanitizationResult:
    return SanitizationResult(
        is_allowed=False,
        warnings=[reason],
        blocked_reason=reason,
        risk_level=RiskLevel.CRITICAL,
    )


def find_blocking_reason(command: str) -> Optional[str]:
    """
    Check the blocking rules (critical literals, then piped remote scripts).

    Args:
        command: The shell command to check.

    Returns:
        The reason of the first matching rule, or None if nothing blocks.
    """
    lowered = command.lower()

    for pattern, reason in CRITICAL_PATTERNS:
        if pattern.lower() in lowered:
            return reason

    for regex, reason in PIPED_SCRIPT_PATTERNS:
        if regex.search(lowered):
            return reason

    return None


def collect_warnings(command: str) -> Tuple[RiskLevel, List[str]]:
    """
    Fold the advisory tiers over a command.

    Returns:
        The highest tier reached and the warnings in tier then rule order.
    """
    lowered = command.lower()
    risk_level = RiskLevel.SAFE
    warnings: List[str] = []

    for level, patterns in sorted(RISK_PATTERNS.items(), key=lambda item: item[0], reverse=True):
        for pattern, warning in patterns:
            if pattern.lower() in lowered:
                warnings.append(warning)
                risk_level = risk_level.combine(level)

    return risk_level, warnings


class CommandSanitizer:
    """Classifies the risk of shell commands."""

    def __init__(self):
        self._logger = logger

    def analyze(self, command: str) -> SanitizationResult:
        """
        Analyze a command for safety.

        Args:
            command: The shell command to analyze.

        Returns:
            The verdict: whether the command may run, its warnings, the
            block reason (if any) and the risk level.
        """
        if not command.strip():
            return SanitizationResult(is_allowed=True, risk_level=RiskLevel.SAFE)

        reason = find_blocking_reason(command)
        if reason is not None:
            self._logger.warning(f"Command '{command}' blocked: {reason}")
            return _blocked(reason)

        risk_level, warnings = collect_warnings(command)
        self._logger.debug(
            f"Classified '{command}' as {risk_level.label}",
            extra={"warnings": warnings},
        )

        return SanitizationResult(
            is_allowed=risk_level < RiskLevel.CRITICAL,
            warnings=warnings,
            blocked_reason=None,
            risk_level=risk_level,
        )


def analyze_command(command: str) -> SanitizationResult:
    """Analyze a command with a default sanitizer."""
    return CommandSanitizer().analyze(command)
