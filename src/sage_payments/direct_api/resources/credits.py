"""The Credits resource"""

from typing import Any, Mapping

from sage_payments.direct_api.resources.base import DirectApiResource


class Credits(DirectApiResource):
    """Refunds issued as credits"""

    ID = "credits"

    def post_credits_reference(self, reference: str, credit: Mapping[str, Any]) -> Any:
        """
        Request a refund for an existing transaction by issuing a credit

        Referencing a previous transaction allows a refund without knowing the
        card number and expiration date.

        Args:
            reference: Reference of the transaction to refund
            credit: Details of the credit, sent as the JSON body

        https://developer.sagepayments.com/bankcard-ecommerce-moto/apis/post/credits/%7Breference%7D
        """
        return self.client.post_request(
            f"credits/{reference}",
            options={"json": dict(credit)},
        )
