# shellbridge/execution/models.py
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shellbridge.shell.models import AdaptationChange


class ProcessOutput(BaseModel):
    """Raw outcome of a finished shell process."""
    model_config = ConfigDict(frozen=True)

    stdout: str = Field("", description="Decoded standard output")
    stderr: str = Field("", description="Decoded standard error")
    exit_code: int = Field(..., description="Process exit status")


class CommandResult(BaseModel):
    """Structured outcome of one orchestrated command."""
    model_config = ConfigDict(frozen=True)

    command: str = Field(..., description="The command as received")
    adapted_command: Optional[str] = Field(None, description="The executed command, if it was rewritten")
    exit_code: int = Field(..., description="Process exit status")
    stdout: str = Field("", description="Captured standard output")
    stderr: str = Field("", description="Captured standard error")
    duration: float = Field(0.0, ge=0, description="Wall-clock seconds from receipt to completion")
    was_adapted: bool = Field(False, description="Whether the executed command differs from the original")
    adaptation_changes: List[AdaptationChange] = Field(default_factory=list)
    sanitization_warnings: List[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Standard output followed by standard error, if any."""
        if not self.stderr:
            return self.stdout
        return self.stdout + ("" if not self.stdout else "\n") + self.stderr

    def to_dict(self) -> Dict[str, Any]:
        """
        Machine-readable representation for AI agents and other tools.

        The key names and nesting are a compatibility contract.
        """
        return {
            "command": self.command,
            "adapted_command": self.adapted_command,
            "exit_code": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "duration_ms": int(self.duration * 1000),
            "success": self.succeeded,
            "was_adapted": self.was_adapted,
            "adaptation_changes": [
                {
                    "type": change.type.value,
                    "description": change.description,
                    "original": change.original,
                    "replacement": change.replacement,
                }
                for change in self.adaptation_changes
            ],
            "warnings": list(self.sanitization_warnings),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """JSON form of :meth:`to_dict` with alphabetically sorted keys."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True, ensure_ascii=False)
