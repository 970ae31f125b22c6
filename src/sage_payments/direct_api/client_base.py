"""
Direct API base client

Builds, signs, sends and parses calls to the JSON Direct API, and applies
the configured retry policy to failed calls.
"""

import json
import logging
import time
import uuid
from typing import Any, Dict, Mapping, Optional, Union

from sage_payments.client.http_client import (
    RawStreamTransport,
    RequestsTransport,
    Transport,
)
from sage_payments.client.retry import RetryPolicy
from sage_payments.config.client_config import (
    DIRECT_API_BASE_PATH,
    DIRECT_API_REQUIRED_KEYS,
    DirectApiConfig,
)
from sage_payments.config.config_loader import build_config
from sage_payments.config.config_validator import ConfigValidator
from sage_payments.crypto.signature import RequestSigner, build_url, encode_body
from sage_payments.exceptions import RequestError
from sage_payments.models.http import OutboundRequest, TransportResponse


class DirectApiClient:
    """
    Client for the Sage Payments Direct API

    Features:
    - Eager configuration validation, listing every missing key at once
    - HMAC-SHA512 signed requests with a fresh nonce and timestamp per attempt
    - Per-status-code retry budgets with per-endpoint overrides
    - GET through the standard transport, POST/PUT through the raw-stream one

    Example:
        >>> client = DirectApiClient({
        ...     "client_id": "...",
        ...     "client_secret": "...",
        ...     "merchant_id": "...",
        ...     "merchant_key": "...",
        ...     "retries": {429: {"global": 2}},
        ... })
        >>> client.get_request("ping")
    """

    def __init__(
        self,
        config: Union[Mapping[str, Any], DirectApiConfig],
        logger: Optional[logging.Logger] = None,
        transport: Optional[Transport] = None,
        raw_transport: Optional[Transport] = None,
        signer: Optional[RequestSigner] = None,
    ) -> None:
        """
        Create a new Direct API client

        Args:
            config: Configuration mapping or resolved DirectApiConfig
            logger: Logger for retry notices and debug traces
            transport: Standard transport (default: RequestsTransport)
            raw_transport: Raw-stream transport (default: RawStreamTransport)
            signer: Request signer (default: built from the configuration)

        Raises:
            ConfigurationError: If required configuration items are missing
        """
        self.config = build_config(
            config, DirectApiConfig, ConfigValidator(DIRECT_API_REQUIRED_KEYS)
        )
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = self.config.base_url
        self.debug = self.config.debug
        self.retry_policy = RetryPolicy.from_config(self.config.retries)
        self.signer = signer or RequestSigner(
            self.config.client_secret, self.config.merchant_id
        )
        self._transport = transport or RequestsTransport(timeout=self.config.timeout)
        self._raw_transport = raw_transport or RawStreamTransport()

    @property
    def base_path(self) -> str:
        """Path prefix shared by all resources"""
        return DIRECT_API_BASE_PATH

    def endpoint_url(self, endpoint: str) -> str:
        """Full URL of an endpoint, without the query string"""
        return f"{self.base_url}/{self.base_path}/{endpoint}"

    def get_request(
        self,
        endpoint: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send a GET request to the Direct API"""
        return self.send_request("GET", endpoint, query, headers, options)

    def post_request(
        self,
        endpoint: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send a POST request to the Direct API"""
        return self.send_request("POST", endpoint, query, headers, options)

    def put_request(
        self,
        endpoint: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send a PUT request to the Direct API"""
        return self.send_request("PUT", endpoint, query, headers, options)

    def send_request(
        self,
        method: str,
        endpoint: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
        retry: int = 0,
    ) -> Any:
        """
        Send a request to the Direct API

        Args:
            method: HTTP method, e.g. GET, POST, PUT
            endpoint: Endpoint relative to the base path, e.g. "charges"
            query: Query parameters
            headers: Additional headers; the computed identity and signature
                headers win on collision
            options: Request options. `json` is the request body; `timeout`,
                `verify`, `cert`, `proxies` and `allow_redirects` are passed
                to the standard transport
            retry: Number of retries already made. Leave at 0; it is
                incremented on every retry allowed by the retry policy

        Returns:
            The decoded JSON response, or an empty dict for an empty body

        Raises:
            RequestError: If the request failed after any allowed retries
            NetworkError: If the standard transport could not reach the API
        """
        method = method.upper()
        options = dict(options or {})
        url = self.endpoint_url(endpoint)

        request = self.build_request(method, url, query, headers, options.get("json"))
        transport = self.transport_for(method)

        start_time = time.time()
        response = transport.send(request, options)
        self._trace(request, response, transport, start_time, retry)

        if response.status_code >= 400:
            if self.retry_policy.should_retry(endpoint, response.status_code, retry):
                retry += 1

                # Frequent retries may point to a problem worth looking into
                self.logger.warning(
                    f'Retry {retry} on the "{endpoint}" endpoint after a '
                    f"{response.status_code} response."
                )
                self._wait_before_retry()

                return self.send_request(method, endpoint, query, headers, options, retry)

            raise RequestError.create(request, response)

        return self.parse_response(response, request)

    def build_request(
        self,
        method: str,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        payload: Optional[Any] = None,
    ) -> OutboundRequest:
        """
        Prepare a signed request

        Args:
            method: HTTP method
            url: Endpoint URL without the query string
            query: Query parameters
            headers: Additional headers
            payload: JSON body

        Returns:
            The request with its final URL, headers and encoded body
        """
        body = encode_body(payload)
        signature = self.signer.sign(method, url, query, body)

        computed_headers = {
            "clientId": self.config.client_id,
            "merchantId": self.config.merchant_id,
            "merchantKey": self.config.merchant_key,
            "nonce": signature.nonce,
            "timestamp": signature.timestamp,
            "authorization": signature.authorization,
            "Content-Type": "application/json",
        }

        # Header names are case-insensitive
        computed_names = {name.lower() for name in computed_headers}
        request_headers: Dict[str, str] = {
            name: value for name, value in (headers or {}).items()
            if name.lower() not in computed_names
        }
        request_headers.update(computed_headers)

        return OutboundRequest(
            method=method,
            url=build_url(url, query),
            headers=request_headers,
            body=body or None,
            request_id=self._generate_request_id(),
        )

    def parse_response(self, response: TransportResponse, request: OutboundRequest) -> Any:
        """
        Decode the JSON body of a successful response

        Some endpoints answer with an empty body; that yields an empty dict.

        Raises:
            RequestError: If the body is not valid JSON
        """
        if not response.body or not response.body.strip():
            return {}

        try:
            return json.loads(response.body)
        except json.JSONDecodeError as e:
            raise RequestError(
                f"Invalid JSON in response to `{request.method} {request.url}`",
                request=request,
                response=response,
                code="REQUEST_PARSE_ERROR",
                cause=e,
            ) from e

    def transport_for(self, method: str) -> Transport:
        """Transport that sends requests with the given method"""
        if method.upper() in self.config.raw_stream_methods:
            return self._raw_transport
        return self._transport

    def close(self) -> None:
        """Close both transports"""
        self._transport.close()
        self._raw_transport.close()

    def __enter__(self) -> "DirectApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability in logs"""
        timestamp = hex(int(time.time() * 1000))[2:]
        return f"sage-{timestamp}-{uuid.uuid4().hex[:8]}"

    def _wait_before_retry(self) -> None:
        if self.config.retry_delay > 0:
            time.sleep(self.config.retry_delay / 1000.0)

    def _trace(
        self,
        request: OutboundRequest,
        response: TransportResponse,
        transport: Transport,
        start_time: float,
        retry: int,
    ) -> None:
        # Headers carry credentials and are never logged
        if not self.debug:
            return
        duration = int((time.time() - start_time) * 1000)
        self.logger.debug(
            f"[{request.request_id}] {request.method} {request.url} -> "
            f"{response.status_code} in {duration}ms "
            f"(attempt {retry + 1}, {transport.name} transport)"
        )
