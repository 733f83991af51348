# shellbridge/__main__.py
"""
Entry point for shellbridge.
"""
from shellbridge.cli import app

if __name__ == "__main__":
    app()
