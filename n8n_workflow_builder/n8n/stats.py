"""Summary statistics over a page of n8n execution records."""
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field


class ExecutionStats(BaseModel):
    """Counts and average duration of a batch of executions."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    waiting: int = 0
    avg_execution_time: str = Field("0.00s", serialization_alias="avgExecutionTime")
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        # n8n timestamps end in "Z", which fromisoformat only accepts on 3.11+
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def is_failed(execution: dict) -> bool:
    return execution.get("status") == "error" or execution.get("mode") == "error"


def summarize_executions(executions: Iterable[dict]) -> ExecutionStats:
    """Reduce execution records to an ExecutionStats.

    - failed: status (or legacy mode) is "error"
    - succeeded: finished and not failed
    - waiting: not finished
    The average covers finished executions with both timestamps.
    """
    total = succeeded = failed = waiting = 0
    total_seconds = 0.0
    timed = 0

    for execution in executions:
        total += 1
        finished = bool(execution.get("finished"))

        if is_failed(execution):
            failed += 1
        elif finished:
            succeeded += 1
        if not finished:
            waiting += 1

        if finished:
            started = _parse_timestamp(execution.get("startedAt"))
            stopped = _parse_timestamp(execution.get("stoppedAt"))
            if started and stopped:
                total_seconds += (stopped - started).total_seconds()
                timed += 1

    average = total_seconds / timed if timed else 0.0

    return ExecutionStats(
        total=total,
        succeeded=succeeded,
        failed=failed,
        waiting=waiting,
        avg_execution_time=f"{average:.2f}s",
    )
