"""SEVD (XML, hosted checkout) clients"""

from sage_payments.sevd.client_base import SevdClient, REQUEST_ROOT, XML_DECLARATION
from sage_payments.sevd.charge import ChargeRequest
from sage_payments.sevd.client_factory import SevdClientFactory

__all__ = [
    "SevdClient",
    "ChargeRequest",
    "SevdClientFactory",
    "REQUEST_ROOT",
    "XML_DECLARATION",
]
