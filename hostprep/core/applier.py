"""
Desired-state applier.

Follows the Check → Plan → Apply pattern for the host name:
1. Validate: reject bad records before touching the machine
2. Check: read the current name through the accessor
3. Apply: rename only if the names differ (case-insensitive)

Each call is a single pass with no retry. Callers must not run two
applies against the same machine at once; the read-compare-write
sequence is not guarded here.
"""

import time
from typing import Optional

from hostprep.accessor.base import SystemAccessor
from hostprep.config.record import ConfigurationRecord
from hostprep.core.result import (
    Action,
    ApplyResult,
    ApplyStatus,
    Change,
    Plan,
    RESTART_ADVISORY,
)
from hostprep.logging import get_logger

logger = get_logger(__name__)

FIELD = "computer_name"


def names_match(current: str, desired: str) -> bool:
    """Host names compare case-insensitively."""
    return current.casefold() == desired.casefold()


class DesiredStateApplier:
    """
    Applies a ConfigurationRecord to a machine.

    Example:
        applier = DesiredStateApplier()
        with HostnameAccessor(LocalTransport()) as accessor:
            plan = applier.plan(record, accessor)
            result = applier.apply(record, accessor)
        print(result.status)
    """

    def plan(self, record: ConfigurationRecord, accessor: SystemAccessor) -> Plan:
        """
        Compare desired and current name without changing anything.

        Raises:
            InvalidConfiguration: If the record is invalid
            AccessorError: If the current name cannot be read
        """
        record.validate()

        current = accessor.get_current_name()
        desired = record.computer_name

        if names_match(current, desired):
            return Plan(action=Action.NONE, reason="Name already matches")

        return Plan(
            action=Action.UPDATE,
            changes=[Change(FIELD, current, desired)],
            reason="Current name differs from desired name",
        )

    def apply(self, record: ConfigurationRecord, accessor: SystemAccessor) -> ApplyResult:
        """
        Bring the machine's name in line with the record.

        Args:
            record: Desired configuration
            accessor: Live system accessor, used for the duration of this call

        Returns:
            ApplyResult describing the outcome

        Raises:
            InvalidConfiguration: If the record is invalid (accessor untouched)
        """
        record.validate()

        desired = record.computer_name
        start_time = time.time()

        try:
            current = accessor.get_current_name()
        except Exception as e:
            logger.error("Could not read current name: %s", e)
            return self._failed("", desired, e, start_time)

        logger.debug("Current name %r, desired %r", current, desired)

        if names_match(current, desired):
            logger.info("Computer name is already %s", current)
            return ApplyResult(
                previous_value=current,
                desired_value=desired,
                changed=False,
                status=ApplyStatus.ALREADY_COMPLIANT,
                message=f"Computer name is already {current}",
                duration=time.time() - start_time,
            )

        logger.info("Renaming computer from %s to %s", current, desired)

        try:
            accessor.set_name(desired)
        except Exception as e:
            logger.error("Rename to %s failed: %s", desired, e)
            return self._failed(current, desired, e, start_time)

        return ApplyResult(
            previous_value=current,
            desired_value=desired,
            changed=True,
            status=ApplyStatus.SUCCESS,
            message=f"Computer name changed from {current} to {desired}. {RESTART_ADVISORY}",
            restart_required=True,
            duration=time.time() - start_time,
        )

    @staticmethod
    def _failed(
        current: str,
        desired: str,
        error: Exception,
        start_time: float,
    ) -> ApplyResult:
        message = str(error) or error.__class__.__name__
        return ApplyResult(
            previous_value=current,
            desired_value=desired,
            changed=False,
            status=ApplyStatus.FAILED,
            message=message,
            error=error,
            duration=time.time() - start_time,
        )


_default_applier: Optional[DesiredStateApplier] = None


def get_applier() -> DesiredStateApplier:
    """Get the shared applier instance."""
    global _default_applier
    if _default_applier is None:
        _default_applier = DesiredStateApplier()
    return _default_applier


def apply(record: ConfigurationRecord, accessor: SystemAccessor) -> ApplyResult:
    """Apply a record with the shared applier."""
    return get_applier().apply(record, accessor)


def plan(record: ConfigurationRecord, accessor: SystemAccessor) -> Plan:
    """Plan a record with the shared applier."""
    return get_applier().plan(record, accessor)
