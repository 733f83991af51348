# shellbridge/shell/__init__.py
"""
Shell dialect handling for shellbridge.

This package detects the target shell dialect and rewrites commands written
for one dialect so they behave the same way under another.
"""
from .dialects import ShellDialect
from .models import ChangeType, AdaptationChange, AdaptedCommand
from .adapter import ShellAdapter, adapt_command

__all__ = [
    'ShellDialect',
    'ChangeType',
    'AdaptationChange',
    'AdaptedCommand',
    'ShellAdapter',
    'adapt_command',
]
