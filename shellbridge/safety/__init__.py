# shellbridge/safety/__init__.py
"""
Safety analysis for shellbridge commands.

This package classifies commands into ordered risk tiers and decides whether
they may be executed.
"""
from .models import RiskLevel, SanitizationResult
from .classifier import (
    CommandSanitizer,
    analyze_command,
    find_blocking_reason,
    collect_warnings,
)

__all__ = [
    'RiskLevel',
    'SanitizationResult',
    'CommandSanitizer',
    'analyze_command',
    'find_blocking_reason',
    'collect_warnings',
]
