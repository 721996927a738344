"""
Unit tests for the desired-state applier.

Uses MemoryAccessor and a call-counting double instead of a real machine.
"""

import pytest

from hostprep.accessor import MemoryAccessor, SystemAccessor
from hostprep.config import ConfigurationRecord
from hostprep.core import Action, ApplyStatus, DesiredStateApplier
from hostprep.core import applier as applier_module
from hostprep.errors import (
    AccessDenied,
    InvalidConfiguration,
    InvalidName,
    Unavailable,
)


class CountingAccessor(SystemAccessor):
    """Accessor double that only counts calls."""

    def __init__(self, name: str = "WIN-DEFAULT"):
        self.name = name
        self.get_calls = 0
        self.set_calls = 0

    def get_current_name(self) -> str:
        self.get_calls += 1
        return self.name

    def set_name(self, name: str) -> None:
        self.set_calls += 1
        self.name = name


class TestApplyPaths:
    """Success, compliant and failure outcomes."""

    def test_success_path(self):
        """Divergent name is renamed once and reported."""
        accessor = MemoryAccessor("WIN-DEFAULT")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.SUCCESS
        assert result.changed is True
        assert result.previous_value == "WIN-DEFAULT"
        assert result.desired_value == "LAB-WIN11-01"
        assert result.restart_required is True
        assert "restart" in result.message.lower()
        assert accessor.name == "LAB-WIN11-01"
        assert accessor.set_calls == 1

    def test_already_compliant(self):
        accessor = MemoryAccessor("LAB-WIN11-01")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.ALREADY_COMPLIANT
        assert result.changed is False
        assert result.restart_required is False
        assert accessor.set_calls == 0

    def test_case_insensitive_match(self):
        """lab-win11-01 and LAB-WIN11-01 are the same host name."""
        accessor = CountingAccessor("lab-win11-01")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.ALREADY_COMPLIANT
        assert accessor.set_calls == 0

    def test_access_denied_on_set(self):
        accessor = MemoryAccessor("WIN-DEFAULT")
        accessor.set_error = AccessDenied("Access is denied")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.FAILED
        assert result.changed is False
        assert result.message == "Access is denied"
        assert isinstance(result.error, AccessDenied)
        assert result.previous_value == "WIN-DEFAULT"
        assert accessor.name == "WIN-DEFAULT"

    @pytest.mark.parametrize("error", [
        InvalidName("name rejected"),
        Unavailable("service not reachable"),
    ])
    def test_other_accessor_failures(self, error):
        accessor = MemoryAccessor("WIN-DEFAULT")
        accessor.set_error = error

        result = DesiredStateApplier().apply(
            ConfigurationRecord(computer_name="LAB-WIN11-01"), accessor
        )

        assert result.status == ApplyStatus.FAILED
        assert result.message
        assert result.error is error

    def test_failure_reading_current_name(self):
        """A failed read is reported, and no write is attempted."""
        accessor = MemoryAccessor("WIN-DEFAULT")
        accessor.get_error = Unavailable("hostnamectl not found")

        result = DesiredStateApplier().apply(
            ConfigurationRecord(computer_name="LAB-WIN11-01"), accessor
        )

        assert result.status == ApplyStatus.FAILED
        assert result.changed is False
        assert "hostnamectl" in result.message
        assert accessor.set_calls == 0

    def test_empty_error_message_still_described(self):
        accessor = MemoryAccessor("WIN-DEFAULT")
        accessor.set_error = AccessDenied()

        result = DesiredStateApplier().apply(
            ConfigurationRecord(computer_name="LAB-WIN11-01"), accessor
        )

        assert result.message == "AccessDenied"

    def test_no_retry_after_failure(self):
        accessor = MemoryAccessor("WIN-DEFAULT")
        accessor.set_error = Unavailable("busy")

        DesiredStateApplier().apply(ConfigurationRecord(computer_name="LAB-WIN11-01"), accessor)

        assert accessor.set_calls == 1


class TestIdempotence:
    """Repeated applies do not mutate twice."""

    def test_second_apply_is_compliant(self):
        accessor = MemoryAccessor("WIN-DEFAULT")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")
        applier = DesiredStateApplier()

        first = applier.apply(record, accessor)
        second = applier.apply(record, accessor)

        assert first.status == ApplyStatus.SUCCESS
        assert second.status == ApplyStatus.ALREADY_COMPLIANT
        assert second.previous_value == "LAB-WIN11-01"
        assert accessor.set_calls == 1

    def test_module_level_apply(self):
        accessor = MemoryAccessor("WIN-DEFAULT")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")

        assert applier_module.apply(record, accessor).status == ApplyStatus.SUCCESS
        assert applier_module.apply(record, accessor).status == ApplyStatus.ALREADY_COMPLIANT


class TestValidityGate:
    """Invalid records never reach the accessor."""

    @pytest.mark.parametrize("name", [
        "",
        "   ",
        "-LAB",
        "LAB-",
        "LAB_WIN",
        "LAB WIN",
        "LAB.WIN11",
        "12345",
        "A" * 64,
    ])
    def test_invalid_names_rejected(self, name):
        accessor = CountingAccessor()
        record = ConfigurationRecord(computer_name=name)

        with pytest.raises(InvalidConfiguration):
            DesiredStateApplier().apply(record, accessor)

        assert accessor.get_calls == 0
        assert accessor.set_calls == 0

    def test_plan_also_gated(self):
        accessor = CountingAccessor()

        with pytest.raises(InvalidConfiguration):
            DesiredStateApplier().plan(ConfigurationRecord(computer_name=""), accessor)

        assert accessor.get_calls == 0

    def test_long_legacy_name_allowed(self):
        """Names over 15 characters are accepted."""
        accessor = MemoryAccessor("WIN-DEFAULT")
        record = ConfigurationRecord(computer_name="LAB-WORKSTATION-0001")

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.SUCCESS


class TestForwardCompatibility:

    def test_only_computer_name_set(self):
        """Reserved fields default to empty and are ignored."""
        accessor = MemoryAccessor("WIN-DEFAULT")
        record = ConfigurationRecord(computer_name="LAB-WIN11-01")

        assert record.reserved_fields() == {}

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.SUCCESS
        assert accessor.calls == ["get_current_name", "set_name"]

    def test_reserved_fields_not_acted_on(self):
        accessor = MemoryAccessor("LAB-WIN11-01")
        record = ConfigurationRecord(
            computer_name="LAB-WIN11-01",
            users=("alice",),
            network={"dns": ["10.0.0.1"]},
        )

        result = DesiredStateApplier().apply(record, accessor)

        assert result.status == ApplyStatus.ALREADY_COMPLIANT
        assert accessor.calls == ["get_current_name"]


class TestPlan:
    """Dry-run planning."""

    def test_plan_update(self):
        accessor = MemoryAccessor("WIN-DEFAULT")

        plan = DesiredStateApplier().plan(
            ConfigurationRecord(computer_name="LAB-WIN11-01"), accessor
        )

        assert plan.action == Action.UPDATE
        assert plan.has_changes()
        assert plan.changes[0].from_value == "WIN-DEFAULT"
        assert plan.changes[0].to_value == "LAB-WIN11-01"
        assert accessor.set_calls == 0

    def test_plan_no_changes(self):
        accessor = MemoryAccessor("lab-win11-01")

        plan = DesiredStateApplier().plan(
            ConfigurationRecord(computer_name="LAB-WIN11-01"), accessor
        )

        assert plan.action == Action.NONE
        assert not plan.has_changes()
        assert str(plan) == "No changes"

    def test_plan_propagates_read_errors(self):
        accessor = MemoryAccessor()
        accessor.get_error = AccessDenied("denied")

        with pytest.raises(AccessDenied):
            DesiredStateApplier().plan(ConfigurationRecord(computer_name="LAB-01"), accessor)
