"""Fakes and helpers shared by the dashboard tests."""

import asyncio

from temporal_tui.sources import Page

WAIT_TIMEOUT = 5


def run(coro):
    """Run a coroutine on a fresh event loop, failing instead of hanging."""
    return asyncio.run(asyncio.wait_for(coro, timeout=WAIT_TIMEOUT))


async def wait_until(predicate, interval=0.005):
    while not predicate():
        await asyncio.sleep(interval)


class FakeSource:
    """Scripted page source.

    Each fetch consumes the next entry of ``responses``: a Page is returned,
    an exception instance is raised. ``gates`` maps a call number (0-based)
    to a threading.Event the call waits on before answering.
    """

    operation = "list things"

    def __init__(self, responses, gates=None):
        self.responses = list(responses)
        self.gates = gates or {}
        self.calls = []
        self.started = 0

    def fetch(self, page_token, query):
        number = self.started
        self.started += 1
        self.calls.append((page_token, query))
        gate = self.gates.get(number)
        if gate is not None:
            gate.wait(timeout=WAIT_TIMEOUT)
        response = self.responses[number]
        if isinstance(response, Exception):
            raise response
        return response


def page(rows, token=b"", detail=None):
    return Page(tuple(rows), token, detail)


def execution_json(workflow_id="order-1", run_id="run-1", status="WORKFLOW_EXECUTION_STATUS_RUNNING",
                   workflow_type="OrderWorkflow", **extra):
    info = {
        "execution": {"workflowId": workflow_id, "runId": run_id},
        "type": {"name": workflow_type},
        "startTime": "2024-05-01T10:00:00.123456789Z",
        "status": status,
        "taskQueue": "orders",
        "historyLength": "12",
        "historySizeBytes": "2048",
    }
    info.update(extra)
    return info


def event_json(event_id, event_type="EVENT_TYPE_ACTIVITY_TASK_SCHEDULED", **attributes):
    return {
        "eventId": str(event_id),
        "eventTime": "2024-05-01T10:00:01Z",
        "eventType": event_type,
        "activityTaskScheduledEventAttributes": attributes,
    }


