# shellbridge/shell/models.py
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from shellbridge.shell.dialects import ShellDialect


class ChangeType(str, Enum):
    """Kinds of rewrite the dialect adapter can record."""
    ARRAY_EXPANSION = "arrayExpansion"
    ECHO_ESCAPE = "echoEscape"
    READ_COMMAND = "readCommand"
    REGEX_MATCHING = "regexMatching"
    COMMAND_SUBSTITUTION = "commandSubstitution"
    PARAMETER_EXPANSION = "parameterExpansion"
    GLOB_QUALIFIER = "globQualifier"
    QUOTING = "quoting"
    OTHER = "other"


class AdaptationChange(BaseModel):
    """A single substitution made while adapting a command."""
    model_config = ConfigDict(frozen=True)

    type: ChangeType = Field(..., description="Machine-readable kind of change")
    description: str = Field(..., description="Human-readable explanation")
    original: str = Field(..., description="Text before the rewrite")
    replacement: str = Field(..., description="Text after the rewrite")


class AdaptedCommand(BaseModel):
    """Result of adapting a command for a target dialect."""
    model_config = ConfigDict(frozen=True)

    original: str = Field(..., description="The command as received")
    adapted: str = Field(..., description="The command after all rewrite passes")
    changes: List[AdaptationChange] = Field(
        default_factory=list, description="Changes in the order they were applied"
    )
    target_dialect: ShellDialect = Field(..., description="Dialect the command was adapted for")

    @property
    def was_modified(self) -> bool:
        return self.original != self.adapted

    @property
    def description(self) -> str:
        if not self.changes:
            return "No changes needed"
        return "\n".join(f"• {change.description}" for change in self.changes)
