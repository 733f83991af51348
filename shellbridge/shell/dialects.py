# shellbridge/shell/dialects.py
"""
Shell dialect detection.
"""
import os
from enum import Enum
from typing import Optional

from shellbridge.constants import DEFAULT_SHELL


class ShellDialect(str, Enum):
    """Shell syntax variants the adapter can target."""
    BASH = "bash"
    ZSH = "zsh"
    SH = "sh"

    @classmethod
    def from_shell_path(cls, shell_path: Optional[str]) -> "ShellDialect":
        """
        Resolve a dialect from a shell executable path such as ``/bin/zsh``.

        Anything that is neither zsh nor bash is treated as a generic POSIX shell.
        """
        shell = shell_path or DEFAULT_SHELL
        if "zsh" in shell:
            return cls.ZSH
        if "bash" in shell:
            return cls.BASH
        return cls.SH

    @classmethod
    def current(cls) -> "ShellDialect":
        """Resolve the dialect of the user's shell from the SHELL environment variable."""
        return cls.from_shell_path(os.environ.get("SHELL", DEFAULT_SHELL))
