"""HTTP exchange models shared by the transports and the clients"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class OutboundRequest:
    """A request as it is put on the wire"""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    request_id: Optional[str] = None


@dataclass
class TransportResponse:
    """
    A response as read off the wire

    `status_lines` holds every literal status line seen for the exchange,
    redirects first; the status code, protocol version and reason phrase
    are those of the last one.
    """
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    protocol_version: str = "1.1"
    reason_phrase: str = ""
    status_lines: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status_code < 400
