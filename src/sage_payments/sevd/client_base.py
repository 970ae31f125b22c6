"""
SEVD base client

Posts a url-encoded XML envelope to the hosted checkout endpoint and
returns the tokenized response string exactly as received.
"""

import logging
import time
import xml.etree.ElementTree as ET
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote_plus

from sage_payments.client.http_client import RawStreamTransport, Transport
from sage_payments.config.client_config import SEVD_REQUIRED_KEYS, SevdConfig
from sage_payments.config.config_loader import build_config
from sage_payments.config.config_validator import ConfigValidator
from sage_payments.exceptions import RequestError
from sage_payments.models.http import OutboundRequest


XML_DECLARATION = '<?xml version="1.0"?>\n'

REQUEST_ROOT = "Request_v1"

REQUEST_NAMESPACES = {
    "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "xmlns:xsd": "http://www.w3.org/2001/XMLSchema",
}


class SevdClient:
    """
    Client for SEVD (hosted checkout) requests

    Requests are sent once, through the raw-stream transport; there is no
    retry policy for SEVD.
    """

    def __init__(
        self,
        config: Union[Mapping[str, Any], SevdConfig],
        logger: Optional[logging.Logger] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Create a new SEVD client

        Args:
            config: Configuration mapping or resolved SevdConfig
            logger: Logger for debug traces
            transport: Transport for the envelope POST (default: RawStreamTransport)

        Raises:
            ConfigurationError: If required configuration items are missing
        """
        self.config = build_config(config, SevdConfig, ConfigValidator(SEVD_REQUIRED_KEYS))
        self.logger = logger or logging.getLogger(__name__)
        self.url = self.config.url
        self._transport = transport or RawStreamTransport()

    def init_xml_request(self) -> ET.Element:
        """Return a new, empty request root element"""
        return ET.Element(REQUEST_ROOT, REQUEST_NAMESPACES)

    def serialize(self, document: ET.Element) -> str:
        """Serialize a request document, XML declaration included"""
        return XML_DECLARATION + ET.tostring(document, encoding="unicode")

    def get_tokenized_request(self, document: ET.Element) -> str:
        """
        Return the tokenized request for the given XML request

        Args:
            document: The request root element

        Returns:
            The tokenized request string, unprocessed

        Raises:
            RequestError: If the gateway answered with an error status, or
                could not be reached (reported as a 504)
        """
        request = OutboundRequest(
            method="POST",
            url=self.url,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/xml",
            },
            body="request=" + quote_plus(self.serialize(document)),
        )

        start_time = time.time()
        response = self._transport.send(request)

        if self.config.debug:
            duration = int((time.time() - start_time) * 1000)
            self.logger.debug(
                f"POST {request.url} -> {response.status_code} in {duration}ms"
            )

        if response.status_code >= 400:
            raise RequestError.create(request, response)

        return response.body

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "SevdClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
