"""
Core hostprep functionality.

Exports the applier, its status model, and platform detection.
"""

from hostprep.core.result import Action, ApplyResult, ApplyStatus, Change, Plan
from hostprep.core.platform import Platform
from hostprep.core.applier import DesiredStateApplier, apply, plan

__all__ = [
    "Action",
    "ApplyResult",
    "ApplyStatus",
    "Change",
    "Plan",
    "Platform",
    "DesiredStateApplier",
    "apply",
    "plan",
]
