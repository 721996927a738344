"""
Reporting - run log file and console summary.

The run log is line-oriented text:

    [2024-01-01 00:00:00] [INFO] Renaming computer from WIN-DEFAULT to LAB-WIN11-01
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from hostprep.core.result import ApplyResult, ApplyStatus, Plan, RESTART_ADVISORY
from hostprep.logging import get_host_logger

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_DIR = Path.home() / ".hostprep" / "logs"


class RunLog:
    """
    Log file for one run, named with the run timestamp.

    Attaches a FileHandler to the root logger while open, so every
    hostprep module logging through get_logger() lands in the file.

    Example:
        with RunLog("~/.hostprep/logs") as run_log:
            ...
        print(run_log.path)
    """

    def __init__(
        self,
        log_dir: Union[str, Path] = DEFAULT_LOG_DIR,
        name: str = "hostprep",
        started_at: Optional[datetime] = None,
    ):
        self.log_dir = Path(log_dir).expanduser()
        self.started_at = started_at or datetime.now()
        stamp = self.started_at.strftime("%Y%m%d-%H%M%S")
        self.path = self.log_dir / f"{name}-{stamp}.log"
        self.handler: Optional[logging.FileHandler] = None
        self._previous_level = logging.WARNING

    def open(self) -> "RunLog":
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.handler = logging.FileHandler(self.path, encoding="utf-8")
        self.handler.setLevel(logging.DEBUG)
        self.handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))

        root = logging.getLogger()
        root.addHandler(self.handler)
        self._previous_level = root.level
        root.setLevel(logging.DEBUG)
        return self

    def close(self) -> None:
        if self.handler is not None:
            root = logging.getLogger()
            root.removeHandler(self.handler)
            root.setLevel(self._previous_level)
            self.handler.close()
            self.handler = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class Reporter:
    """
    Turns plans and results into log entries and console output.
    """

    def __init__(self, name: str = "hostprep.report"):
        self.logger = get_host_logger(name)

    def report_plan(self, plan: Plan) -> None:
        if not plan.has_changes():
            self.logger.info("No changes needed: %s", plan.reason)
            self.logger.action("none", "computer_name", plan.reason)
            return

        for change in plan.changes:
            self.logger.info("Planned %s: %s", plan.action.value, change)
            self.logger.action(plan.action.value, change.field,
                               f"{change.from_value} → {change.to_value}")

    def report(self, result: ApplyResult) -> None:
        """
        Log the result and print a summary line.
        """
        if result.status == ApplyStatus.SUCCESS:
            self.logger.info(
                "Computer name changed from %s to %s",
                result.previous_value, result.desired_value,
            )
            self.logger.success(
                f"Renamed {result.previous_value} → {result.desired_value} "
                f"({result.duration:.2f}s)"
            )
            if result.restart_required:
                self.logger.warning(RESTART_ADVISORY)
                self.logger.advisory(RESTART_ADVISORY)

        elif result.status == ApplyStatus.ALREADY_COMPLIANT:
            self.logger.info("Already compliant: %s", result.message)
            self.logger.success(result.message)

        else:
            self.logger.error("Apply failed: %s", result.message)
            self.logger.failure(f"Failed to set computer name to {result.desired_value}: {result.message}")
