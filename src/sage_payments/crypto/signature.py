"""
Request Signature Service
Signs Direct API requests with HMAC-SHA512

Every Direct API request carries an `authorization` header computed over
the method, the full URL (query string included), the JSON body, the
merchant ID, a nonce and a timestamp, keyed with the client secret.
"""

import base64
import json
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from sage_payments.exceptions import SagePaymentsError


@dataclass
class SignatureResult:
    """Signature result containing the signature and the values it covers"""
    authorization: str
    nonce: str
    timestamp: str
    data_string: str
    algorithm: str = "HMAC-SHA512"


def generate_nonce() -> str:
    """Unique, unpredictable per-request value"""
    return uuid.uuid4().hex


def unix_timestamp() -> str:
    return str(int(time.time()))


def build_url(url: str, query: Optional[Mapping[str, Any]] = None) -> str:
    """Append the url-encoded query string to the URL, if any"""
    if not query:
        return url
    return f"{url}?{urlencode(query)}"


def encode_body(payload: Optional[Any]) -> str:
    """
    Serialize a JSON request body

    The returned string is both signed and sent as-is, so the signature
    always covers the exact bytes on the wire. `None` encodes to an empty
    string.
    """
    if payload is None:
        return ""
    return json.dumps(payload, separators=(",", ":"))


class RequestSigner:
    """
    HMAC-SHA512 request signer for the Direct API

    Example:
        >>> signer = RequestSigner(client_secret="secret", merchant_id="999999999997")
        >>> result = signer.sign("GET", "https://api-cert.sagepayments.com/bankcard/v1/ping")
        >>> headers = {"nonce": result.nonce, "timestamp": result.timestamp,
        ...            "authorization": result.authorization}
    """

    def __init__(
        self,
        client_secret: str,
        merchant_id: str,
        nonce_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        """
        Create a new RequestSigner instance

        Args:
            client_secret: Key for the HMAC
            merchant_id: Merchant ID included in every signing string
            nonce_factory: Nonce source (default: random UUID hex)
            clock: Timestamp source returning unix seconds as a string
        """
        if not client_secret:
            raise SagePaymentsError("Client secret is required for signing", code="CONFIG_SIGNER")

        self._key = client_secret.encode("utf-8")
        self.merchant_id = merchant_id
        self._nonce_factory = nonce_factory or generate_nonce
        self._clock = clock or unix_timestamp

    def signing_string(
        self,
        method: str,
        url: str,
        body: str,
        nonce: str,
        timestamp: str,
    ) -> str:
        """
        Prepare the canonical string covered by the signature

        Args:
            method: HTTP method, upper case
            url: Full URL including the query string, if any
            body: Encoded JSON body or an empty string
            nonce: Per-request nonce
            timestamp: Unix timestamp in seconds
        """
        return f"{method}{url}{body}{self.merchant_id}{nonce}{timestamp}"

    def sign(
        self,
        method: str,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        body: str = "",
        nonce: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> SignatureResult:
        """
        Sign a request

        Args:
            method: HTTP method
            url: URL without the query string
            query: Query parameters, appended to the URL before signing
            body: Encoded JSON body (see `encode_body`)
            nonce: Fixed nonce; generated when omitted
            timestamp: Fixed timestamp; taken from the clock when omitted

        Returns:
            Signature result with the base64-encoded signature
        """
        nonce = nonce if nonce is not None else self._nonce_factory()
        timestamp = timestamp if timestamp is not None else self._clock()

        data_string = self.signing_string(
            method.upper(), build_url(url, query), body, nonce, timestamp
        )

        return SignatureResult(
            authorization=base64.b64encode(self._digest(data_string)).decode("ascii"),
            nonce=nonce,
            timestamp=timestamp,
            data_string=data_string,
        )

    def verify(self, data_string: str, authorization: str) -> bool:
        """
        Verify a base64 signature against a signing string

        Returns:
            True if the signature matches
        """
        try:
            signature = base64.b64decode(authorization, validate=True)
        except ValueError:
            return False

        h = hmac.HMAC(self._key, hashes.SHA512())
        h.update(data_string.encode("utf-8"))
        try:
            h.verify(signature)
        except InvalidSignature:
            return False
        return True

    def _digest(self, data_string: str) -> bytes:
        h = hmac.HMAC(self._key, hashes.SHA512())
        h.update(data_string.encode("utf-8"))
        return h.finalize()
