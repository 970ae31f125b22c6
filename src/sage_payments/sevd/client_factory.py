"""
Factory for SEVD request clients
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from sage_payments.client.http_client import Transport
from sage_payments.config.client_config import SevdConfig
from sage_payments.exceptions import ArgumentError
from sage_payments.sevd.charge import ChargeRequest


REQUESTS: Dict[str, Type[ChargeRequest]] = {
    ChargeRequest.ID: ChargeRequest,
}


class SevdClientFactory:
    """Builds SEVD request clients that share one logger"""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.transport = transport

    def get(
        self,
        request_id: str,
        config: Union[Mapping[str, Any], SevdConfig],
    ) -> ChargeRequest:
        """
        Return an initialized client for the requested request

        Args:
            request_id: The request ID, currently only "charge"
            config: Client configuration

        Raises:
            ArgumentError: When an unknown request ID is given
            ConfigurationError: If required configuration items are missing
        """
        request_class = REQUESTS.get(request_id)
        if request_class is None:
            raise ArgumentError(f'Unknown request "{request_id}"', field="request_id")

        return request_class(config, logger=self.logger, transport=self.transport)

    @staticmethod
    def available() -> List[str]:
        """IDs of the requests the factory can build"""
        return list(REQUESTS)
