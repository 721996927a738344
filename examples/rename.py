"""
Programmatic hostprep example - rename this machine from a record.

Run with (as root / elevated):
    python examples/rename.py examples/lab-win11-01.yaml
"""

import sys

from hostprep import DesiredStateApplier, HostnameAccessor, load_record
from hostprep.report import Reporter, RunLog
from hostprep.transport import LocalTransport

record = load_record(sys.argv[1] if len(sys.argv) > 1 else "examples/lab-win11-01.yaml")

with RunLog() as run_log, HostnameAccessor(LocalTransport()) as accessor:
    result = DesiredStateApplier().apply(record, accessor)
    Reporter().report(result)

print(f"Log written to {run_log.path}")
sys.exit(0 if result.success else 1)
