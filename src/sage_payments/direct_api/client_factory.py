"""
Factory for Direct API resource clients
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from sage_payments.client.http_client import Transport
from sage_payments.config.client_config import DirectApiConfig
from sage_payments.direct_api.resources import (
    ApiHealth,
    Charges,
    Credits,
    DirectApiResource,
)
from sage_payments.exceptions import ArgumentError


RESOURCES: Dict[str, Type[DirectApiResource]] = {
    ApiHealth.ID: ApiHealth,
    Charges.ID: Charges,
    Credits.ID: Credits,
}


class DirectApiClientFactory:
    """
    Builds Direct API resource clients that share one logger

    Example:
        >>> factory = DirectApiClientFactory(logging.getLogger("payments"))
        >>> charges = factory.get("charges", config)
        >>> charges.post_charges(Charges.CHARGE_TYPE_SALE, {...})
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        transport: Optional[Transport] = None,
        raw_transport: Optional[Transport] = None,
    ) -> None:
        """
        Args:
            logger: Logger passed to every client
            transport: Standard transport shared by every client (optional)
            raw_transport: Raw-stream transport shared by every client (optional)
        """
        self.logger = logger or logging.getLogger(__name__)
        self.transport = transport
        self.raw_transport = raw_transport

    def get(
        self,
        resource_id: str,
        config: Union[Mapping[str, Any], DirectApiConfig],
    ) -> DirectApiResource:
        """
        Return an initialized client for the requested resource

        Args:
            resource_id: One of "api_health", "charges", "credits"
            config: Client configuration

        Raises:
            ArgumentError: When an unknown resource ID is given
            ConfigurationError: If required configuration items are missing
        """
        resource_class = RESOURCES.get(resource_id)
        if resource_class is None:
            raise ArgumentError(f'Unknown API "{resource_id}"', field="resource_id")

        return resource_class(
            config,
            logger=self.logger,
            transport=self.transport,
            raw_transport=self.raw_transport,
        )

    @staticmethod
    def available() -> List[str]:
        """IDs of the resources the factory can build"""
        return list(RESOURCES)
