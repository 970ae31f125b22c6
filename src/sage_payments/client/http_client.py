"""
HTTP transport layer for the Sage Payments APIs

Two interchangeable transports sit behind the same interface:

- RequestsTransport: the standard path, a pooled `requests.Session`.
- RawStreamTransport: a lower-level `urllib3` path that assembles header
  lines by hand and streams the body. POST/PUT calls to the Direct API and
  all SEVD calls go through it because the gateway rejects those requests
  when issued through the standard client.

Transports never raise on HTTP status; they return a TransportResponse and
leave status handling to the API clients.
"""

import codecs
import http
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from sage_payments.exceptions import NetworkError
from sage_payments.models.http import OutboundRequest, TransportResponse


# Logger for this module
logger = logging.getLogger(__name__)

USER_AGENT = "sage-payments-python"

# Request options passed through to requests.Session.request
PASS_THROUGH_OPTIONS = (
    "timeout",
    "verify",
    "cert",
    "proxies",
    "allow_redirects",
)

# Status lines synthesized when the raw-stream path gets nothing usable back
STATUS_LINE_UNKNOWN_ERROR = "HTTP/1.1 504 Unknown Error"
STATUS_LINE_GATEWAY_TIMEOUT = "HTTP/1.1 504 Gateway Timeout"

_STATUS_LINE = re.compile(r"^HTTP/([0-9.]+)\s+([0-9]+)(?:\s+(.*))?$")


def parse_status_lines(lines: Iterable[str]) -> Tuple[int, str, str]:
    """
    Return the status code, protocol version and reason phrase of the last
    status line in the given raw header lines

    There is one status line per response in a redirect chain; the last one
    belongs to the final response.

    Raises:
        ValueError: If the lines contain no status line
    """
    parsed = []
    for line in lines:
        match = _STATUS_LINE.match(line.strip())
        if match:
            parsed.append((int(match.group(2)), match.group(1), match.group(3) or ""))

    if not parsed:
        raise ValueError("No HTTP status line found in the response headers")
    return parsed[-1]


def convert_header_lines(lines: Iterable[str]) -> Dict[str, str]:
    """Convert raw `Name: value` header lines to a dictionary, skipping status lines"""
    headers: Dict[str, str] = {}
    for line in lines:
        if _STATUS_LINE.match(line.strip()):
            continue
        name, separator, value = line.partition(":")
        if not separator:
            continue
        headers[name.strip()] = value.strip()
    return headers


def _format_version(version: Optional[int]) -> str:
    if not version:
        return "1.1"
    return f"{version // 10}.{version % 10}"


def _reason_for(status: int) -> str:
    try:
        return http.HTTPStatus(status).phrase
    except ValueError:
        return ""


def _headers_after_last_status_line(lines: List[str]) -> List[str]:
    last = 0
    for index, line in enumerate(lines):
        if _STATUS_LINE.match(line.strip()):
            last = index
    return lines[last + 1:]


def build_response(status_lines_and_headers: List[str], body: str) -> TransportResponse:
    """Build a TransportResponse from raw header lines (status lines included)"""
    status_code, protocol_version, reason_phrase = parse_status_lines(status_lines_and_headers)
    return TransportResponse(
        status_code=status_code,
        headers=convert_header_lines(_headers_after_last_status_line(status_lines_and_headers)),
        body=body,
        protocol_version=protocol_version,
        reason_phrase=reason_phrase,
        status_lines=[
            line for line in status_lines_and_headers if _STATUS_LINE.match(line.strip())
        ],
    )


class Transport(ABC):
    """Sends one OutboundRequest and returns what came back"""

    name = "transport"

    @abstractmethod
    def send(
        self,
        request: OutboundRequest,
        options: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        """
        Send a request

        Args:
            request: Fully prepared request (URL with query, final headers, encoded body)
            options: Transport options, where the transport supports them

        Returns:
            The response, whatever its status code
        """

    def close(self) -> None:
        """Release pooled connections"""

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class RequestsTransport(Transport):
    """
    Standard transport backed by a pooled requests.Session

    Supports the pass-through options `timeout`, `verify`, `cert`,
    `proxies` and `allow_redirects`. Transport failures (DNS, refused or
    reset connections, timeouts) are raised as NetworkError.
    """

    name = "requests"

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self._session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with connection pooling"""
        session = requests.Session()
        session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })

        # Retries are decided by the API clients, per status code
        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=0,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def send(
        self,
        request: OutboundRequest,
        options: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        kwargs = {
            key: value for key, value in (options or {}).items()
            if key in PASS_THROUGH_OPTIONS
        }
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)

        try:
            response = self._session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body.encode("utf-8") if request.body else None,
                **kwargs,
            )
        except requests.exceptions.Timeout as e:
            raise NetworkError.timeout(request, cause=e) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError.connection_failed(request, cause=e) from e

        version = _format_version(getattr(response.raw, "version", None))
        status_lines = [
            f"HTTP/{version} {r.status_code} {r.reason or ''}".rstrip()
            for r in [*response.history, response]
        ]

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
            protocol_version=version,
            reason_phrase=response.reason or "",
            status_lines=status_lines,
        )

    def close(self) -> None:
        self._session.close()


class RawStreamTransport(Transport):
    """
    Raw-stream transport backed by urllib3

    The body is read as a stream and the response is rebuilt as literal
    `Name: value` header lines. The status is taken from the last status line of the
    exchange. When the exchange fails outright a `504 Unknown Error` is
    synthesized; when no response headers can be observed (for example the
    remote end closed the connection mid-flight) a `504 Gateway Timeout` is
    synthesized. No exception escapes for transport failures.
    """

    name = "raw_stream"

    def __init__(
        self,
        timeout: Optional[float] = None,
        pool_manager: Optional[urllib3.PoolManager] = None,
        chunk_size: int = 8192,
        max_redirects: int = 5,
    ) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.max_redirects = max_redirects
        self._pool = pool_manager or urllib3.PoolManager(
            headers={"User-Agent": USER_AGENT},
        )

    def _retries(self) -> Retry:
        # Follow redirects, never retry on failure
        return Retry(
            total=None,
            connect=0,
            read=0,
            status=0,
            other=0,
            redirect=self.max_redirects,
            raise_on_redirect=False,
            raise_on_status=False,
        )

    def send(
        self,
        request: OutboundRequest,
        options: Optional[Mapping[str, Any]] = None,
    ) -> TransportResponse:
        kwargs: Dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        try:
            response = self._pool.request(
                request.method,
                request.url,
                body=request.body.encode("utf-8") if request.body is not None else None,
                headers=dict(request.headers),
                preload_content=False,
                retries=self._retries(),
                **kwargs,
            )
        except urllib3.exceptions.HTTPError as e:
            # No response at all; the cause is unknown to the caller
            logger.debug(f"Raw-stream request to {request.url} failed: {e}")
            return build_response([STATUS_LINE_UNKNOWN_ERROR], "")

        try:
            body = self._read_body(response)
            response_header = self._response_header_lines(response)
        except (urllib3.exceptions.HTTPError, OSError) as e:
            logger.debug(f"Raw-stream response from {request.url} was cut short: {e}")
            body = ""
            response_header = []
        finally:
            response.release_conn()

        if not response_header:
            response_header = [STATUS_LINE_GATEWAY_TIMEOUT]

        return build_response(response_header, body)

    def _read_body(self, response: Any) -> str:
        chunks = []
        for chunk in response.stream(self.chunk_size, decode_content=True):
            chunks.append(chunk)
        return b"".join(chunks).decode(self._charset(response), errors="replace")

    def _charset(self, response: Any) -> str:
        content_type = response.headers.get("Content-Type", "")
        for part in content_type.split(";"):
            name, _, value = part.strip().partition("=")
            if name.lower() == "charset" and value:
                return self._known_charset(value.strip("\"'"))
        return "utf-8"

    def _known_charset(self, charset: str) -> str:
        # Unknown charsets decode as utf-8
        try:
            return codecs.lookup(charset).name
        except LookupError:
            logger.debug(f"Unknown response charset {charset!r}, decoding as utf-8")
            return "utf-8"

    def _response_header_lines(self, response: Any) -> List[str]:
        if not response.status:
            return []

        lines = []
        history = response.retries.history if response.retries is not None else ()
        for entry in history:
            if entry.status:
                lines.append(f"HTTP/1.1 {entry.status} {_reason_for(entry.status)}".rstrip())

        version = _format_version(getattr(response, "version", None))
        lines.append(f"HTTP/{version} {response.status} {response.reason or ''}".rstrip())
        lines.extend(f"{name}: {value}" for name, value in response.headers.items())
        return lines

    def close(self) -> None:
        self._pool.clear()
