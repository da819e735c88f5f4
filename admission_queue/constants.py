"""
Application constants.
Centralized location for all constant values used across the package.
"""

from enum import StrEnum


class LaneState(StrEnum):
    """
    Where a key sits in a keyed queue.

    State transitions:
    - absent -> BACKLOG (enqueue)
    - BACKLOG -> ACTIVE (start)
    - ACTIVE -> absent (dequeue)
    """

    BACKLOG = "backlog"
    ACTIVE = "active"


class WorkStatus(StrEnum):
    """Outcome of executing an admitted item."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


# Default values
DEFAULT_QUEUE_NAME = "default"

# Metrics names
METRIC_BACKLOG_DEPTH = "admission_queue_backlog_depth"
METRIC_ACTIVE_LANES = "admission_queue_active_lanes"
METRIC_ENQUEUED = "admission_queue_enqueued_total"
METRIC_DUPLICATES = "admission_queue_duplicates_total"
METRIC_ADMITTED = "admission_queue_admitted_total"
METRIC_WORK_COMPLETED = "admission_queue_work_completed_total"
METRIC_WORK_DURATION = "admission_queue_work_duration_seconds"

# Trace span names
SPAN_EXECUTE_WORK = "execute_work"
SPAN_RUN_BATCH = "run_batch"
