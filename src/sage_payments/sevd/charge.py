"""
SEVD charge request

Assembles the `Request_v1` document for a hosted, tokenized sale or
authorization and exchanges it for a tokenized request string.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Mapping, Optional, Union

from sage_payments.client.http_client import Transport
from sage_payments.config.client_config import SevdConfig
from sage_payments.exceptions import ArgumentError
from sage_payments.sevd.client_base import SevdClient


TRANSACTION_REQUIRED_FIELDS = (
    "Reference1",
    "Amount",
)

CUSTOMER_NAME_FIELDS = (
    "FirstName",
    "MI",
    "LastName",
)

CUSTOMER_ADDRESS_FIELDS = (
    "AddressLine1",
    "AddressLine2",
    "City",
    "State",
    "ZipCode",
    "Country",
)

# Shown on the hosted UI under Address but never editable or visible
HIDDEN_ADDRESS_FIELDS = (
    "EmailAddress",
    "Telephone",
    "CustomerNumber",
)


def _add_child(parent: ET.Element, tag: str, text: Optional[Any] = None) -> ET.Element:
    child = ET.SubElement(parent, tag)
    if text is not None:
        child.text = str(text)
    return child


def _add_display_settings(parent: ET.Element, tag: str, enabled: bool, visible: bool) -> ET.Element:
    node = _add_child(parent, tag)
    _add_child(node, "Enabled", "true" if enabled else "false")
    _add_child(node, "Visible", "true" if visible else "false")
    return node


class ChargeRequest:
    """
    Client for issuing charge requests

    Example:
        >>> charge = ChargeRequest(config)
        >>> token = charge.ui_sale(
        ...     {"Reference1": "ORDER-1001", "Amount": "25.00"},
        ...     {"Name": {"FirstName": "Ada", "LastName": "Lovelace"}},
        ...     capture=True,
        ...     ui_settings={"edit_customer": True},
        ... )
    """

    ID = "charge"

    # Transaction types
    CHARGE_TYPE_CAPTURE = "11"
    CHARGE_TYPE_AUTH = "12"

    def __init__(
        self,
        config: Optional[Union[Mapping[str, Any], SevdConfig]] = None,
        logger: Optional[logging.Logger] = None,
        client: Optional[SevdClient] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Args:
            config: Client configuration; required unless `client` is given
            logger: Logger passed to the client
            client: Existing SEVD client to reuse
            transport: Transport passed to the client

        Raises:
            ConfigurationError: If required configuration items are missing
        """
        if client is None:
            client = SevdClient(
                config if config is not None else {},
                logger=logger,
                transport=transport,
            )
        self.client = client

    @property
    def config(self) -> SevdConfig:
        return self.client.config

    def ui_sale(
        self,
        transaction: Mapping[str, Any],
        customer: Mapping[str, Any],
        capture: bool,
        ui_settings: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Return a tokenized request for a UI-enabled sale

        Args:
            transaction: Transaction details, see `build_transaction_base`
            customer: Customer details, see `build_customer`
            capture: True for a sale (capture), False for authorization only
            ui_settings: UI settings, see `build_ui_customer`

        Returns:
            The tokenized request string

        Raises:
            ArgumentError: When required transaction items are missing; nothing is sent
            RequestError: If the request was unsuccessful
        """
        request = self.build_request(transaction, customer, capture, ui_settings)
        return self.client.get_tokenized_request(request)

    def build_request(
        self,
        transaction: Mapping[str, Any],
        customer: Mapping[str, Any],
        capture: bool,
        ui_settings: Optional[Mapping[str, Any]] = None,
    ) -> ET.Element:
        """Build the complete request document without sending it"""
        self.validate_transaction(transaction)

        request = self.client.init_xml_request()

        self.build_application(request)
        self.build_payments(request, transaction, customer, capture)
        self.build_ui(request, ui_settings or {})

        return request

    def build_application(self, request: ET.Element) -> None:
        application = _add_child(request, "Application")
        _add_child(application, "ApplicationID", self.config.application_id)
        _add_child(application, "LanguageID", self.config.language_id)

    def build_payments(
        self,
        request: ET.Element,
        transaction: Mapping[str, Any],
        customer: Mapping[str, Any],
        capture: bool,
    ) -> None:
        payments = _add_child(request, "Payments")
        payment_type = _add_child(payments, "PaymentType")

        self.build_merchant(payment_type)
        self.build_transaction_base(payment_type, transaction, capture)
        self.build_customer(payment_type, customer)
        self.build_vault_storage(payment_type)

    def build_ui(self, request: ET.Element, ui_settings: Mapping[str, Any]) -> None:
        single_payment = _add_child(_add_child(request, "UI"), "SinglePayment")

        self.build_ui_transaction_base(single_payment)
        self.build_ui_customer(single_payment, ui_settings)

    def build_merchant(self, payment_type: ET.Element) -> None:
        merchant = _add_child(payment_type, "Merchant")
        _add_child(merchant, "MerchantID", self.config.merchant_id)
        _add_child(merchant, "MerchantKey", self.config.merchant_key)

    def validate_transaction(self, transaction: Mapping[str, Any]) -> None:
        """
        Raises:
            ArgumentError: Naming every required item missing from the transaction
        """
        missing = [name for name in TRANSACTION_REQUIRED_FIELDS if name not in transaction]
        if missing:
            raise ArgumentError(
                "The following required items are missing from the transaction "
                f"data: {', '.join(missing)}.",
                missing=missing,
            )

    def build_transaction_base(
        self,
        payment_type: ET.Element,
        transaction: Mapping[str, Any],
        capture: bool,
    ) -> None:
        """
        Add the TransactionBase element

        Supported transaction items:
        - Reference1: (required) The merchant order reference.
        - Amount: (required) The total amount of the charge.
        - TransactionID: (optional) The merchant transaction ID; omitted
          from the document when empty.
        """
        self.validate_transaction(transaction)

        transaction_base = _add_child(payment_type, "TransactionBase")

        if transaction.get("TransactionID"):
            _add_child(transaction_base, "TransactionID", transaction["TransactionID"])

        _add_child(
            transaction_base,
            "TransactionType",
            self.CHARGE_TYPE_CAPTURE if capture else self.CHARGE_TYPE_AUTH,
        )
        _add_child(transaction_base, "Reference1", transaction["Reference1"])
        _add_child(transaction_base, "Amount", transaction["Amount"])

    def build_customer(self, payment_type: ET.Element, customer: Mapping[str, Any]) -> None:
        """
        Add the Customer element

        Supported customer items, all optional and defaulting to empty strings:
        - Name: FirstName, MI, LastName
        - Address: AddressLine1, AddressLine2, City, State, ZipCode, Country
        """
        name = {field: "" for field in CUSTOMER_NAME_FIELDS}
        name.update(customer.get("Name") or {})
        address = {field: "" for field in CUSTOMER_ADDRESS_FIELDS}
        address.update(customer.get("Address") or {})

        customer_node = _add_child(payment_type, "Customer")

        name_node = _add_child(customer_node, "Name")
        for field in CUSTOMER_NAME_FIELDS:
            _add_child(name_node, field, name[field])

        address_node = _add_child(customer_node, "Address")
        for field in CUSTOMER_ADDRESS_FIELDS:
            _add_child(address_node, field, address[field])

    def build_vault_storage(self, payment_type: ET.Element) -> None:
        # Always store the card on file
        vault_storage = _add_child(payment_type, "VaultStorage")
        _add_child(vault_storage, "Service", "CREATE")

    def build_ui_transaction_base(self, single_payment: ET.Element) -> None:
        transaction_base = _add_child(single_payment, "TransactionBase")

        _add_display_settings(transaction_base, "Reference1", enabled=False, visible=True)
        _add_display_settings(transaction_base, "SubtotalAmount", enabled=False, visible=True)
        _add_display_settings(transaction_base, "TaxAmount", enabled=False, visible=False)
        _add_display_settings(transaction_base, "ShippingAmount", enabled=False, visible=False)

    def build_ui_customer(self, single_payment: ET.Element, ui_settings: Mapping[str, Any]) -> None:
        """
        Add the UI Customer element

        Supported UI settings:
        - edit_customer: (bool, optional) Allow editing the customer name and
          billing address on the hosted UI. Defaults to False.
        """
        customer = _add_child(single_payment, "Customer")
        enabled = bool(ui_settings.get("edit_customer"))

        name_node = _add_child(customer, "Name")
        for field in CUSTOMER_NAME_FIELDS:
            _add_display_settings(name_node, field, enabled=enabled, visible=True)

        address_node = _add_child(customer, "Address")
        for field in CUSTOMER_ADDRESS_FIELDS:
            _add_display_settings(address_node, field, enabled=enabled, visible=True)
        for field in HIDDEN_ADDRESS_FIELDS:
            _add_display_settings(address_node, field, enabled=False, visible=False)
