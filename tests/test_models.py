"""Tests for parsing Temporal HTTP API responses into rows."""

import base64
from datetime import datetime, timezone

import pytest

from temporal_tui.models import (
    HistoryEvent,
    Payload,
    PendingActivityState,
    WorkflowDetail,
    WorkflowExecution,
    WorkflowExecutionStatus,
    format_timestamp,
    parse_timestamp,
)
from temporal_tui.sdk.exceptions import ResponseShapeError

from helpers import event_json, execution_json


def b64(text):
    return base64.b64encode(text.encode()).decode()


class TestTimestamps:
    def test_rfc3339_with_nanoseconds(self):
        dt = parse_timestamp("2024-05-01T10:00:00.123456789Z")
        assert dt == datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    def test_short_fraction_is_padded(self):
        dt = parse_timestamp("2024-05-01T10:00:00.5Z")
        assert dt.microsecond == 500000

    def test_seconds_and_nanos_object(self):
        dt = parse_timestamp({"seconds": "1714557600", "nanos": 500000000})
        assert dt == datetime(2024, 5, 1, 10, 0, 0, 500000, tzinfo=timezone.utc)

    def test_missing_is_none(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_garbage_raises(self):
        with pytest.raises(ResponseShapeError):
            parse_timestamp("yesterday")

    def test_format(self):
        dt = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert format_timestamp(dt) == "24-05-01 10:00:00 UTC"
        assert format_timestamp(None) == "-"


class TestWorkflowExecutionStatus:
    @pytest.mark.parametrize("raw,expected", [
        ("WORKFLOW_EXECUTION_STATUS_RUNNING", WorkflowExecutionStatus.RUNNING),
        ("WORKFLOW_EXECUTION_STATUS_TIMED_OUT", WorkflowExecutionStatus.TIMED_OUT),
        (2, WorkflowExecutionStatus.COMPLETED),
        ("6", WorkflowExecutionStatus.CONTINUED_AS_NEW),
        (None, WorkflowExecutionStatus.UNSPECIFIED),
    ])
    def test_parse(self, raw, expected):
        assert WorkflowExecutionStatus.parse(raw) is expected

    def test_unknown_raises(self):
        with pytest.raises(ResponseShapeError):
            WorkflowExecutionStatus.parse("WORKFLOW_EXECUTION_STATUS_SLEEPING")
        with pytest.raises(ResponseShapeError):
            WorkflowExecutionStatus.parse(42)

    def test_labels(self):
        assert WorkflowExecutionStatus.CONTINUED_AS_NEW.label == "Continued-As-New"
        assert WorkflowExecutionStatus.CONTINUED_AS_NEW.query_value == "ContinuedAsNew"
        assert WorkflowExecutionStatus.TIMED_OUT.query_value == "TimedOut"


class TestWorkflowExecution:
    def test_from_api(self):
        execution = WorkflowExecution.from_api(
            execution_json(closeTime="2024-05-01T10:05:00Z", status="WORKFLOW_EXECUTION_STATUS_COMPLETED")
        )
        assert execution.workflow_id == "order-1"
        assert execution.run_id == "run-1"
        assert execution.type == "OrderWorkflow"
        assert execution.status is WorkflowExecutionStatus.COMPLETED
        assert execution.task_queue == "orders"
        assert execution.history_length == 12
        assert execution.history_size_bytes == 2048
        assert execution.key == ("order-1", "run-1")
        assert execution.close_time_string() == "24-05-01 10:05:00 UTC"

    def test_missing_type_raises(self):
        info = execution_json()
        del info["type"]
        with pytest.raises(ResponseShapeError, match="has no type"):
            WorkflowExecution.from_api(info)

    def test_missing_workflow_id_raises(self):
        info = execution_json()
        info["execution"] = {}
        with pytest.raises(ResponseShapeError, match="no workflow id"):
            WorkflowExecution.from_api(info)

    def test_duration_of_open_execution(self, fixed_now):
        execution = WorkflowExecution.from_api(execution_json(startTime="2024-05-01T11:00:00Z"))
        assert execution.duration(fixed_now).total_seconds() == 3600

    def test_duration_without_start(self):
        execution = WorkflowExecution(WorkflowExecutionStatus.RUNNING, "T", "wf")
        assert execution.duration() is None


class TestHistoryEvent:
    def test_from_api(self):
        event = HistoryEvent.from_api(event_json(5, activityId="charge"))
        assert event.event_id == 5
        assert event.event_type == "ActivityTaskScheduled"
        assert event.event_time == datetime(2024, 5, 1, 10, 0, 1, tzinfo=timezone.utc)
        assert event.attributes == {"activityId": "charge"}
        assert '"activityId": "charge"' in event.attributes_json()

    def test_missing_event_id_raises(self):
        raw = event_json(1)
        del raw["eventId"]
        with pytest.raises(ResponseShapeError):
            HistoryEvent.from_api(raw)


class TestWorkflowDetail:
    def test_pending_activities(self):
        detail = WorkflowDetail.from_api({
            "workflowExecutionInfo": execution_json(),
            "pendingActivities": [{
                "activityId": "a1",
                "activityType": {"name": "Charge"},
                "state": "PENDING_ACTIVITY_STATE_STARTED",
                "attempt": 2,
                "maximumAttempts": 5,
                "lastFailure": {"message": "card declined"},
            }],
        })
        activity = detail.pending_activities[0]
        assert detail.execution.workflow_id == "order-1"
        assert activity.type == "Charge"
        assert activity.state is PendingActivityState.STARTED
        assert activity.attempt == 2
        assert activity.last_failure.message == "card declined"

    def test_invalid_execution_is_wrapped(self):
        info = execution_json()
        del info["type"]
        with pytest.raises(ResponseShapeError, match="invalid workflow execution: workflow execution has no type"):
            WorkflowDetail.from_api({"workflowExecutionInfo": info})

    def test_invalid_pending_activity_is_wrapped(self):
        with pytest.raises(ResponseShapeError, match="invalid workflow pending activity"):
            WorkflowDetail.from_api({
                "workflowExecutionInfo": execution_json(),
                "pendingActivities": [{"activityId": "a1", "state": "PENDING_ACTIVITY_STATE_LOST"}],
            })


class TestPayload:
    def test_json_payload(self):
        payload = Payload.from_api({"metadata": {"encoding": b64("json/plain")}, "data": b64('{"amount": 10}')})
        assert payload.decoded() == {"amount": 10}

    def test_null_payload(self):
        payload = Payload.from_api({"metadata": {"encoding": b64("binary/null")}})
        assert payload.decoded() is None

    def test_other_encoding_is_text(self):
        payload = Payload.from_api({"metadata": {"encoding": b64("binary/plain")}, "data": b64("raw")})
        assert payload.decoded() == "raw"
