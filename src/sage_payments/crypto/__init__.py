"""Cryptography module initialization

This module provides request signing for the Direct API:
- RequestSigner: HMAC-SHA512 signatures over method, URL, body, nonce and timestamp
"""

from sage_payments.crypto.signature import (
    RequestSigner,
    SignatureResult,
    build_url,
    encode_body,
    generate_nonce,
    unix_timestamp,
)

__all__ = [
    "RequestSigner",
    "SignatureResult",
    "build_url",
    "encode_body",
    "generate_nonce",
    "unix_timestamp",
]
