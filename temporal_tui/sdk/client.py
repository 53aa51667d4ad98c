"""
Temporal SDK Client
Read-only client for the Temporal frontend HTTP API
"""

import base64
from urllib.parse import quote
from typing import Any, Dict, List, Optional, Tuple

import requests

from .exceptions import (
    TemporalAPIError,
    TemporalAuthenticationError,
    TemporalNotFoundError,
)


def encode_page_token(token: Optional[bytes]) -> Optional[str]:
    """Encode an opaque page token the way the HTTP API expects (base64)"""
    if not token:
        return None
    return base64.b64encode(token).decode('ascii')


def decode_page_token(value: Optional[str]) -> bytes:
    """Decode a page token from a response; missing or empty gives b''"""
    if not value:
        return b''
    return base64.b64decode(value)


class WorkflowsAPI:
    """Workflow execution endpoints"""

    def __init__(self, client: 'TemporalSDK'):
        self.client = client

    def _path(self, suffix: str = '') -> str:
        namespace = quote(self.client.namespace, safe='')
        return f'/api/v1/namespaces/{namespace}/workflows{suffix}'

    def _workflow_path(self, workflow_id: str, suffix: str = '') -> str:
        """Path for one workflow; ids may contain '/', '?' or '#'"""
        return self._path(f'/{quote(workflow_id, safe="")}{suffix}')

    def list(
        self,
        page_size: int,
        next_page_token: Optional[bytes] = None,
        query: str = '',
    ) -> Tuple[List[Dict[str, Any]], bytes]:
        """List workflow executions matching a visibility query

        Args:
            page_size: Maximum number of executions per page
            next_page_token: Token from the previous page, None for the first page
            query: Visibility query (e.g. 'ExecutionStatus="Running"')

        Returns:
            (executions, next_page_token). An empty token means no further pages.
        """
        params: Dict[str, Any] = {'pageSize': page_size}
        token = encode_page_token(next_page_token)
        if token:
            params['nextPageToken'] = token
        if query:
            params['query'] = query

        response = self.client._request('GET', self._path(), params=params) or {}
        executions = response.get('executions') or []
        return executions, decode_page_token(response.get('nextPageToken'))

    def describe(self, workflow_id: str, run_id: Optional[str] = None) -> Dict[str, Any]:
        """Describe a single workflow execution

        Args:
            workflow_id: Workflow ID
            run_id: Run ID, None for the latest run

        Returns:
            Raw DescribeWorkflowExecution response
        """
        params = {}
        if run_id:
            params['execution.runId'] = run_id
        return self.client._request(
            'GET', self._workflow_path(workflow_id), params=params
        ) or {}

    def history(
        self,
        workflow_id: str,
        run_id: Optional[str] = None,
        next_page_token: Optional[bytes] = None,
        page_size: Optional[int] = None,
    ) -> Tuple[List[Dict[str, Any]], bytes]:
        """Get one page of a workflow execution's event history

        Returns:
            (events, next_page_token). An empty token means no further pages.
        """
        params: Dict[str, Any] = {}
        if run_id:
            params['execution.runId'] = run_id
        token = encode_page_token(next_page_token)
        if token:
            params['nextPageToken'] = token
        if page_size:
            params['maximumPageSize'] = page_size

        response = self.client._request(
            'GET', self._workflow_path(workflow_id, '/history'), params=params
        ) or {}
        events = (response.get('history') or {}).get('events') or []
        return events, decode_page_token(response.get('nextPageToken'))


class TemporalSDK:
    """
    Main Temporal SDK client

    Usage:
        sdk = TemporalSDK(
            server_url='http://localhost:7243',
            namespace='default',
        )

        # First page of running workflows
        executions, token = sdk.workflows.list(48, query='ExecutionStatus="Running"')
    """

    def __init__(
        self,
        server_url: str,
        namespace: str = 'default',
        api_key: Optional[str] = None,
        timeout: int = 30,
        cert: Optional[Tuple[str, str]] = None,
        verify: Any = True,
    ):
        self.server_url = server_url.rstrip('/')
        self.namespace = namespace
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()
        self.session.verify = verify

        if cert:
            self.session.cert = cert
        if api_key:
            self.session.headers['Authorization'] = f'Bearer {api_key}'

        self.workflows = WorkflowsAPI(self)

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
    ) -> Any:
        """Make HTTP request to API"""
        url = f'{self.server_url}{path}'

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                timeout=self.timeout
            )
        except requests.Timeout:
            raise TemporalAPIError(f'Request to {url} timed out after {self.timeout}s')
        except requests.ConnectionError as e:
            raise TemporalAPIError(f'Could not connect to {self.server_url}: {e}')

        if response.status_code >= 400:
            message = _error_message(response)
            if response.status_code == 404:
                raise TemporalNotFoundError(message)
            if response.status_code in (401, 403):
                raise TemporalAuthenticationError(message, response.status_code)
            raise TemporalAPIError(message, response.status_code)

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except ValueError:
            raise TemporalAPIError(f'Invalid JSON in response from {url}', response.status_code)


def _error_message(response: requests.Response) -> str:
    """Pull the gRPC status message out of an error body when there is one"""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get('message'):
        return f"{response.status_code}: {body['message']}"
    return f'{response.status_code}: {response.reason or "request failed"}'
