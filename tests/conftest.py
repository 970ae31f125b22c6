"""
Shared test fixtures

Clients are given stub transports so that no test touches the network.
"""

from typing import Any, Dict, List, Mapping, Optional

import pytest

from sage_payments.client.http_client import Transport
from sage_payments.crypto.signature import RequestSigner
from sage_payments.models.http import OutboundRequest, TransportResponse


class StubTransport(Transport):
    """Replays canned responses and records what was sent"""

    name = "stub"

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.requests: List[OutboundRequest] = []
        self.options: List[Dict[str, Any]] = []
        self.closed = False

    def send(
        self,
        request: OutboundRequest,
        options: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        self.requests.append(request)
        self.options.append(dict(options or {}))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def make_response(
    status_code: int = 200,
    body: str = "",
    reason: str = "OK",
    headers: Optional[Dict[str, str]] = None,
) -> TransportResponse:
    return TransportResponse(
        status_code=status_code,
        headers=headers or {},
        body=body,
        protocol_version="1.1",
        reason_phrase=reason,
        status_lines=[f"HTTP/1.1 {status_code} {reason}"],
    )


FIXED_NONCE = "5f2b1c3d4e"
FIXED_TIMESTAMP = "1700000000"


@pytest.fixture
def direct_api_config() -> dict:
    return {
        "client_id": "client-123",
        "client_secret": "s3cr3t",
        "merchant_id": "999999999997",
        "merchant_key": "K3Y",
    }


@pytest.fixture
def sevd_config() -> dict:
    return {
        "application_id": "APP-1",
        "client_id": "client-123",
        "client_secret": "s3cr3t",
        "merchant_id": "999999999997",
        "merchant_key": "K3Y",
        "language_id": "EN",
    }


@pytest.fixture
def fixed_signer() -> RequestSigner:
    return RequestSigner(
        client_secret="s3cr3t",
        merchant_id="999999999997",
        nonce_factory=lambda: FIXED_NONCE,
        clock=lambda: FIXED_TIMESTAMP,
    )
