"""The Charges resource"""

from typing import Any, Mapping

from sage_payments.direct_api.resources.base import DirectApiResource
from sage_payments.exceptions import ArgumentError


class Charges(DirectApiResource):
    """Create charges and capture authorized ones"""

    ID = "charges"

    CHARGE_TYPE_AUTH = "Auth"
    CHARGE_TYPE_FORCE = "Force"
    CHARGE_TYPE_SALE = "Sale"

    SUPPORTED_CHARGE_TYPES = (
        CHARGE_TYPE_SALE,
        CHARGE_TYPE_AUTH,
        CHARGE_TYPE_FORCE,
    )

    def post_charges(self, charge_type: str, charge: Mapping[str, Any]) -> Any:
        """
        Create a new charge

        Args:
            charge_type: One of "Auth", "Force" or "Sale" (case-sensitive)
            charge: Details of the charge, sent as the JSON body

        Returns:
            The decoded response

        Raises:
            ArgumentError: If the charge type is not supported; nothing is sent

        https://developer.sagepayments.com/bankcard-ecommerce-moto/apis/post/charges
        """
        self.validate_charge_type(charge_type)

        return self.client.post_request(
            "charges",
            query={"type": charge_type},
            options={"json": dict(charge)},
        )

    def put_charges(self, reference: str, charge: Mapping[str, Any]) -> Any:
        """
        Capture an existing Auth charge

        https://developer.sagepayments.com/bankcard-ecommerce-moto/apis/put/charges/%7Breference%7D
        """
        return self.client.put_request(
            f"charges/{reference}",
            options={"json": dict(charge)},
        )

    def validate_charge_type(self, charge_type: str) -> None:
        if charge_type in self.SUPPORTED_CHARGE_TYPES:
            return

        raise ArgumentError(
            f"Unknown charge type {charge_type}.",
            field="type",
        )
