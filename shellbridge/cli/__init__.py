# shellbridge/cli/__init__.py
"""
Command-line interface for shellbridge.
"""
from .main import app

__all__ = ['app']
