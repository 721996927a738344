"""
Status model for desired-state application.

Plan describes what would change; ApplyResult describes what did.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Any

RESTART_ADVISORY = "A restart may be required for the new name to take full effect."


class Action(Enum):
    """Planned action for the managed attribute."""
    NONE = "none"
    UPDATE = "update"


class ApplyStatus(Enum):
    """Terminal outcome of a single apply pass."""
    SUCCESS = "success"
    ALREADY_COMPLIANT = "already_compliant"
    FAILED = "failed"


@dataclass
class Change:
    """Represents a single property change."""
    field: str
    from_value: Any
    to_value: Any

    def __str__(self):
        return f"{self.field}: {self.from_value} → {self.to_value}"


@dataclass
class Plan:
    """
    Dry-run outcome: whether the attribute diverges and how.
    """
    action: Action
    changes: List[Change] = field(default_factory=list)
    reason: str = ""

    def has_changes(self) -> bool:
        """Check if plan has any changes."""
        return self.action != Action.NONE and len(self.changes) > 0

    def __str__(self):
        if self.action == Action.NONE:
            return "No changes"

        lines = [f"Action: {self.action.value}"]
        if self.reason:
            lines.append(f"Reason: {self.reason}")
        for change in self.changes:
            lines.append(f"  {change}")
        return "\n".join(lines)


@dataclass
class ApplyResult:
    """
    Result of one apply pass.

    AlreadyCompliant and Failed both carry changed=False; callers must
    look at status to tell them apart.
    """
    previous_value: str
    desired_value: str
    changed: bool
    status: ApplyStatus
    message: str = ""
    restart_required: bool = False
    error: Optional[Exception] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """True for SUCCESS and ALREADY_COMPLIANT."""
        return self.status != ApplyStatus.FAILED

    def __str__(self):
        return f"{self.status.value}: {self.message}"
