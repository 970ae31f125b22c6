"""The API Health resource"""

from typing import Any

from sage_payments.direct_api.resources.base import DirectApiResource


class ApiHealth(DirectApiResource):
    """Health checks for the front-end and back-end APIs"""

    ID = "api_health"

    def get_ping(self) -> Any:
        """
        Return basic information about the front-end API

        https://developer.sagepayments.com/bankcard-ecommerce-moto/apis/get/ping
        """
        return self.client.get_request("ping")

    def get_status(self) -> Any:
        """
        Return basic information about the front-end and back-end APIs

        https://developer.sagepayments.com/bankcard-ecommerce-moto/apis/get/status
        """
        return self.client.get_request("status")
