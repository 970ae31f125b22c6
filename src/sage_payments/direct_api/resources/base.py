"""
Base resource class for Direct API resources

Each resource owns a DirectApiClient and exposes verb-specific methods that
map to fixed endpoints.
"""

import logging
from typing import Any, Mapping, Optional, Union

from sage_payments.client.http_client import Transport
from sage_payments.config.client_config import DirectApiConfig
from sage_payments.direct_api.client_base import DirectApiClient


class DirectApiResource:
    """
    Base class for Direct API resources

    Attributes:
        ID: Identifier used by the client factory
        client: The client that signs and sends the requests
    """

    ID = ""

    def __init__(
        self,
        config: Optional[Union[Mapping[str, Any], DirectApiConfig]] = None,
        logger: Optional[logging.Logger] = None,
        client: Optional[DirectApiClient] = None,
        transport: Optional[Transport] = None,
        raw_transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize the resource

        Args:
            config: Client configuration; required unless `client` is given
            logger: Logger passed to the client
            client: Existing client to reuse
            transport: Standard transport passed to the client
            raw_transport: Raw-stream transport passed to the client

        Raises:
            ConfigurationError: If required configuration items are missing
        """
        if client is None:
            client = DirectApiClient(
                config if config is not None else {},
                logger=logger,
                transport=transport,
                raw_transport=raw_transport,
            )
        self.client = client

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "DirectApiResource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
