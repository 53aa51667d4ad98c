"""Domain rows built from Temporal HTTP API responses.

Every row is immutable once constructed. Parsing functions raise
ResponseShapeError when a response lacks a field the dashboard relies on, so
the data controller can refuse the whole page instead of showing a partial one.
"""

from __future__ import annotations

import base64
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from .sdk.exceptions import ResponseShapeError

TIME_FORMAT = "%y-%m-%d %H:%M:%S %Z"

_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a protobuf Timestamp in either JSON form.

    Accepts RFC 3339 strings (nanosecond precision is truncated to
    microseconds) and ``{"seconds": ..., "nanos": ...}`` objects.
    """
    if not value:
        return None
    if isinstance(value, dict):
        seconds = int(value.get("seconds") or 0)
        nanos = int(value.get("nanos") or 0)
        return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(
            microseconds=nanos // 1000
        )
    text = str(value).replace("Z", "+00:00")
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise ResponseShapeError(f"invalid timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime | None) -> str:
    if dt is None:
        return "-"
    return dt.strftime(TIME_FORMAT)


def _parse_enum(enum_cls, raw: Any, prefix: str, what: str):
    """Map a proto enum (number or ``PREFIX_NAME`` string) onto enum_cls."""
    members = list(enum_cls)
    if raw is None or raw == "":
        return members[0]
    if isinstance(raw, int) or (isinstance(raw, str) and raw.isdigit()):
        index = int(raw)
        if 0 <= index < len(members):
            return members[index]
        raise ResponseShapeError(f"invalid {what}: {raw}")
    name = str(raw)
    if name.startswith(prefix):
        name = name[len(prefix):]
    try:
        return enum_cls[name]
    except KeyError:
        raise ResponseShapeError(f"invalid {what}: {raw}") from None


class WorkflowExecutionStatus(Enum):
    """Execution status; member order follows the proto enum numbers."""

    UNSPECIFIED = "Unspecified"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"
    CANCELED = "Canceled"
    TERMINATED = "Terminated"
    CONTINUED_AS_NEW = "Continued-As-New"
    TIMED_OUT = "Timed-Out"

    @classmethod
    def parse(cls, raw: Any) -> WorkflowExecutionStatus:
        return _parse_enum(cls, raw, "WORKFLOW_EXECUTION_STATUS_", "status")

    @property
    def label(self) -> str:
        return self.value

    @property
    def query_value(self) -> str:
        """Name used by visibility queries, e.g. ``ContinuedAsNew``."""
        return self.value.replace("-", "")


class PendingActivityState(Enum):
    UNSPECIFIED = "Unspecified"
    SCHEDULED = "Scheduled"
    STARTED = "Started"
    CANCEL_REQUESTED = "CancelRequested"

    @classmethod
    def parse(cls, raw: Any) -> PendingActivityState:
        return _parse_enum(cls, raw, "PENDING_ACTIVITY_STATE_", "pending activity state")


@dataclass(frozen=True)
class Payload:
    metadata: dict[str, bytes]
    data: bytes

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Payload:
        metadata = {
            key: base64.b64decode(value or "")
            for key, value in (raw.get("metadata") or {}).items()
        }
        return cls(metadata=metadata, data=base64.b64decode(raw.get("data") or ""))

    def decoded(self) -> Any:
        """Best-effort decode for display: JSON payloads as values, others as text."""
        encoding = self.metadata.get("encoding", b"")
        if encoding == b"json/plain":
            try:
                return json.loads(self.data)
            except ValueError:
                pass
        if encoding == b"binary/null":
            return None
        return self.data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Failure:
    message: str
    source: str = ""
    stack_trace: str = ""

    @classmethod
    def from_api(cls, raw: dict[str, Any] | None) -> Failure | None:
        if not raw:
            return None
        return cls(
            message=raw.get("message") or "",
            source=raw.get("source") or "",
            stack_trace=raw.get("stackTrace") or "",
        )


@dataclass(frozen=True)
class WorkflowExecution:
    """One row of the executions table."""

    status: WorkflowExecutionStatus
    type: str
    workflow_id: str
    run_id: str = ""
    task_queue: str = ""
    start_time: datetime | None = None
    close_time: datetime | None = None
    history_length: int = 0
    history_size_bytes: int = 0

    @classmethod
    def from_api(cls, info: dict[str, Any]) -> WorkflowExecution:
        """Build from a WorkflowExecutionInfo JSON object."""
        execution = info.get("execution") or {}
        workflow_id = execution.get("workflowId")
        if not workflow_id:
            raise ResponseShapeError("workflow execution has no workflow id")
        workflow_type = (info.get("type") or {}).get("name")
        if not workflow_type:
            raise ResponseShapeError("workflow execution has no type")
        return cls(
            status=WorkflowExecutionStatus.parse(info.get("status")),
            type=workflow_type,
            workflow_id=workflow_id,
            run_id=execution.get("runId") or "",
            task_queue=info.get("taskQueue") or "",
            start_time=parse_timestamp(info.get("startTime")),
            close_time=parse_timestamp(info.get("closeTime")),
            history_length=int(info.get("historyLength") or 0),
            history_size_bytes=int(info.get("historySizeBytes") or 0),
        )

    @property
    def key(self) -> tuple[str, str]:
        return (self.workflow_id, self.run_id)

    def start_time_string(self) -> str:
        return format_timestamp(self.start_time)

    def close_time_string(self) -> str:
        return format_timestamp(self.close_time)

    def duration(self, now: datetime | None = None) -> timedelta | None:
        """Run time so far; open executions are measured up to ``now``."""
        if self.start_time is None:
            return None
        end = self.close_time or now or datetime.now(timezone.utc)
        return end - self.start_time


@dataclass(frozen=True)
class PendingActivity:
    id: str
    type: str | None
    state: PendingActivityState
    attempt: int = 0
    maximum_attempts: int = 0
    heartbeat_details: tuple[Payload, ...] = ()
    last_heartbeat_time: datetime | None = None
    last_started_time: datetime | None = None
    scheduled_time: datetime | None = None
    expiration_time: datetime | None = None
    last_failure: Failure | None = None
    last_worker_identity: str = ""
    last_attempt_complete_time: datetime | None = None
    next_attempt_schedule_time: datetime | None = None

    @classmethod
    def from_api(cls, info: dict[str, Any]) -> PendingActivity:
        details = (info.get("heartbeatDetails") or {}).get("payloads") or []
        return cls(
            id=info.get("activityId") or "",
            type=(info.get("activityType") or {}).get("name"),
            state=PendingActivityState.parse(info.get("state")),
            attempt=int(info.get("attempt") or 0),
            maximum_attempts=int(info.get("maximumAttempts") or 0),
            heartbeat_details=tuple(Payload.from_api(p) for p in details),
            last_heartbeat_time=parse_timestamp(info.get("lastHeartbeatTime")),
            last_started_time=parse_timestamp(info.get("lastStartedTime")),
            scheduled_time=parse_timestamp(info.get("scheduledTime")),
            expiration_time=parse_timestamp(info.get("expirationTime")),
            last_failure=Failure.from_api(info.get("lastFailure")),
            last_worker_identity=info.get("lastWorkerIdentity") or "",
            last_attempt_complete_time=parse_timestamp(info.get("lastAttemptCompleteTime")),
            next_attempt_schedule_time=parse_timestamp(info.get("nextAttemptScheduleTime")),
        )


def _event_type_name(raw: str) -> str:
    """EVENT_TYPE_WORKFLOW_EXECUTION_STARTED -> WorkflowExecutionStarted"""
    if not raw.startswith("EVENT_TYPE_"):
        return raw
    words = raw[len("EVENT_TYPE_"):].split("_")
    return "".join(w.capitalize() for w in words)


@dataclass(frozen=True)
class HistoryEvent:
    """One row of the history table in the detail view."""

    event_id: int
    event_type: str
    event_time: datetime | None = None
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> HistoryEvent:
        event_id = raw.get("eventId")
        if event_id in (None, ""):
            raise ResponseShapeError("history event has no event id")
        attributes: dict[str, Any] = {}
        for key, value in raw.items():
            if key.endswith("EventAttributes") and isinstance(value, dict):
                attributes = value
                break
        return cls(
            event_id=int(event_id),
            event_type=_event_type_name(raw.get("eventType") or "EVENT_TYPE_UNSPECIFIED"),
            event_time=parse_timestamp(raw.get("eventTime")),
            attributes=attributes,
        )

    def attributes_json(self) -> str:
        return json.dumps(self.attributes, indent=2, sort_keys=True)


@dataclass(frozen=True)
class WorkflowDetail:
    """Describe response: the execution summary plus its pending activities."""

    execution: WorkflowExecution | None
    pending_activities: tuple[PendingActivity, ...] = ()

    @classmethod
    def from_api(cls, response: dict[str, Any]) -> WorkflowDetail:
        info = response.get("workflowExecutionInfo")
        try:
            execution = WorkflowExecution.from_api(info) if info else None
        except ResponseShapeError as e:
            raise ResponseShapeError(f"invalid workflow execution: {e}") from e
        try:
            pending = tuple(
                PendingActivity.from_api(p) for p in response.get("pendingActivities") or []
            )
        except ResponseShapeError as e:
            raise ResponseShapeError(f"invalid workflow pending activity: {e}") from e
        return cls(execution=execution, pending_activities=pending)
