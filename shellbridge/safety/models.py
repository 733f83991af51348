# shellbridge/safety/models.py
from enum import IntEnum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RiskLevel(IntEnum):
    """Ordered risk tiers; comparisons use the integer rank."""
    SAFE = 0            # Read-only and informational commands
    LOW = 1             # Network access, package installs
    MEDIUM = 2          # File deletion/moves, privilege use
    HIGH = 3            # Recursive deletion, dynamic execution
    CRITICAL = 4        # Destructive operations, never executed

    def combine(self, other: "RiskLevel") -> "RiskLevel":
        """Combine two findings; the higher rank always wins."""
        return max(self, other)

    @classmethod
    def parse(cls, value: Union[str, int, "RiskLevel"]) -> "RiskLevel":
        """Accept a level, its rank or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip()
        if name.isdigit():
            return cls(int(name))
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(level.name.lower() for level in cls)
            raise ValueError(f"Unknown risk level '{value}' (expected one of: {valid})") from None

    @property
    def label(self) -> str:
        return self.name.lower()


class SanitizationResult(BaseModel):
    """Verdict of the risk classifier for one command."""
    model_config = ConfigDict(frozen=True)

    is_allowed: bool = Field(..., description="Whether the command may be executed")
    warnings: List[str] = Field(default_factory=list, description="Warnings in tier then rule order")
    blocked_reason: Optional[str] = Field(None, description="Reason the command was blocked")
    risk_level: RiskLevel = Field(RiskLevel.SAFE, description="Highest tier reached")

    @model_validator(mode="after")
    def _check_verdict(self) -> "SanitizationResult":
        if self.is_allowed != (self.risk_level < RiskLevel.CRITICAL):
            raise ValueError("is_allowed must be true exactly when risk_level is below critical")
        if (self.blocked_reason is None) != self.is_allowed:
            raise ValueError("blocked_reason must be set exactly when the command is not allowed")
        return self
