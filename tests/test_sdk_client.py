"""Tests for the Temporal HTTP SDK client."""

from unittest.mock import MagicMock

import pytest
import requests

from temporal_tui.sdk import (
    TemporalAPIError,
    TemporalAuthenticationError,
    TemporalNotFoundError,
    TemporalSDK,
)
from temporal_tui.sdk.client import decode_page_token, encode_page_token


def make_response(status_code=200, body=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def sdk():
    client = TemporalSDK(server_url="http://temporal:7243/", namespace="orders", api_key="secret", timeout=5)
    client.session.request = MagicMock()
    return client


class TestPageTokens:
    def test_encode(self):
        assert encode_page_token(b"tok1") == "dG9rMQ=="
        assert encode_page_token(b"") is None
        assert encode_page_token(None) is None

    def test_decode(self):
        assert decode_page_token("dG9rMg==") == b"tok2"
        assert decode_page_token(None) == b""
        assert decode_page_token("") == b""


class TestSession:
    def test_bearer_auth_and_url(self, sdk):
        assert sdk.server_url == "http://temporal:7243"
        assert sdk.session.headers["Authorization"] == "Bearer secret"

    def test_client_cert(self):
        client = TemporalSDK("https://temporal", cert=("client.pem", "client.key"), verify="ca.pem")
        assert client.session.cert == ("client.pem", "client.key")
        assert client.session.verify == "ca.pem"


class TestWorkflowsAPI:
    def test_list_first_page(self, sdk):
        sdk.session.request.return_value = make_response(body={
            "executions": [{"execution": {"workflowId": "a"}}],
            "nextPageToken": "dG9rMg==",
        })

        executions, token = sdk.workflows.list(48)

        assert executions == [{"execution": {"workflowId": "a"}}]
        assert token == b"tok2"
        sdk.session.request.assert_called_once_with(
            "GET",
            "http://temporal:7243/api/v1/namespaces/orders/workflows",
            params={"pageSize": 48},
            timeout=5,
        )

    def test_list_with_token_and_query(self, sdk):
        sdk.session.request.return_value = make_response(body={})

        executions, token = sdk.workflows.list(10, b"tok1", 'ExecutionStatus="Running"')

        assert executions == []
        assert token == b""
        _, kwargs = sdk.session.request.call_args
        assert kwargs["params"] == {
            "pageSize": 10,
            "nextPageToken": "dG9rMQ==",
            "query": 'ExecutionStatus="Running"',
        }

    def test_describe(self, sdk):
        sdk.session.request.return_value = make_response(body={"workflowExecutionInfo": {}})

        assert sdk.workflows.describe("order-1", "run-1") == {"workflowExecutionInfo": {}}
        args, kwargs = sdk.session.request.call_args
        assert args[1].endswith("/namespaces/orders/workflows/order-1")
        assert kwargs["params"] == {"execution.runId": "run-1"}

    def test_history(self, sdk):
        sdk.session.request.return_value = make_response(body={
            "history": {"events": [{"eventId": "1"}]},
            "nextPageToken": "",
        })

        events, token = sdk.workflows.history("order-1", None, b"tok1", 20)

        assert events == [{"eventId": "1"}]
        assert token == b""
        args, kwargs = sdk.session.request.call_args
        assert args[1].endswith("/workflows/order-1/history")
        assert kwargs["params"] == {"nextPageToken": "dG9rMQ==", "maximumPageSize": 20}


    def test_workflow_id_is_one_path_segment(self, sdk):
        sdk.session.request.return_value = make_response(body={})

        sdk.workflows.describe("orders/2024?x#1", "run-1")
        describe_url = sdk.session.request.call_args[0][1]
        sdk.workflows.history("orders/2024?x#1")
        history_url = sdk.session.request.call_args[0][1]

        assert describe_url.endswith("/namespaces/orders/workflows/orders%2F2024%3Fx%231")
        assert history_url.endswith("/workflows/orders%2F2024%3Fx%231/history")

    def test_namespace_is_encoded(self):
        client = TemporalSDK("http://temporal", namespace="team a/b")
        client.session.request = MagicMock(return_value=make_response(body={}))

        client.workflows.list(10)

        assert client.session.request.call_args[0][1] == (
            "http://temporal/api/v1/namespaces/team%20a%2Fb/workflows"
        )


class TestErrors:
    def test_not_found(self, sdk):
        sdk.session.request.return_value = make_response(404, {"message": "workflow not found"})
        with pytest.raises(TemporalNotFoundError, match="404: workflow not found") as exc:
            sdk.workflows.describe("missing")
        assert exc.value.status_code == 404

    @pytest.mark.parametrize("status", [401, 403])
    def test_authentication(self, sdk, status):
        sdk.session.request.return_value = make_response(status, {"message": "denied"})
        with pytest.raises(TemporalAuthenticationError) as exc:
            sdk.workflows.list(48)
        assert exc.value.status_code == status

    def test_server_error_without_body(self, sdk):
        sdk.session.request.return_value = make_response(500, reason="Internal Server Error")
        with pytest.raises(TemporalAPIError, match="500: Internal Server Error") as exc:
            sdk.workflows.list(48)
        assert exc.value.status_code == 500

    def test_timeout(self, sdk):
        sdk.session.request.side_effect = requests.Timeout()
        with pytest.raises(TemporalAPIError, match="timed out after 5s"):
            sdk.workflows.list(48)

    def test_connection_error(self, sdk):
        sdk.session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TemporalAPIError, match="Could not connect to http://temporal:7243"):
            sdk.workflows.list(48)

    def test_invalid_json(self, sdk):
        sdk.session.request.return_value = make_response(200)
        with pytest.raises(TemporalAPIError, match="Invalid JSON"):
            sdk.workflows.list(48)

    def test_no_content(self, sdk):
        sdk.session.request.return_value = make_response(204)
        assert sdk.workflows.list(48) == ([], b"")
