# shellbridge/__init__.py
"""
shellbridge: shell command adaptation and safety pipeline for AI agents.
"""
from shellbridge.constants import APP_VERSION

__version__ = APP_VERSION
