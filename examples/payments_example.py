"""
Usage Examples for the Sage Payments SDK
Demonstrates configuration, Direct API charges and SEVD hosted checkout
"""

import logging

from sage_payments import (
    ArgumentError,
    Charges,
    ConfigLoader,
    DirectApiClientFactory,
    DirectApiConfig,
    Environment,
    RequestError,
    SevdClientFactory,
)


logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger("payments")


# =============================================================================
# Example 1: Programmatic Configuration
# =============================================================================

def programmatic_config_example() -> DirectApiConfig:
    """Configure the Direct API client with all options"""
    loader = ConfigLoader()

    return loader.load_direct_api(
        config={
            # Credentials from the developer portal
            "client_id": "your-client-id",
            "client_secret": "your-client-secret",
            "merchant_id": "999999999997",
            "merchant_key": "your-merchant-key",

            # Environment settings
            "env": Environment.SANDBOX,  # Debug tracing is on in the sandbox
            "timeout": 30,

            # Retry twice on 429, but never for credits
            "retries": {
                429: {"global": 2, "endpoints": {"credits": 0}},
            },
            "retry_delay": 500,
        }
    )


# =============================================================================
# Example 2: File and Environment Configuration
# =============================================================================

def file_config_example() -> DirectApiConfig:
    """
    Load configuration from a JSON file, overridden by environment variables

    export SAGE_CLIENT_SECRET="your-client-secret"
    export SAGE_ENV="production"
    """
    loader = ConfigLoader()
    loader.create_template("./config/sage_config.json")

    return loader.load_direct_api(file="./config/sage_config.json", env=True)


# =============================================================================
# Example 3: Direct API Sale
# =============================================================================

def direct_api_sale_example(config: DirectApiConfig) -> None:
    """Charge a card through the Direct API"""
    factory = DirectApiClientFactory(logger)

    with factory.get("charges", config) as charges:
        try:
            result = charges.post_charges(Charges.CHARGE_TYPE_SALE, {
                "Ecommerce": {
                    "OrderNumber": "ORDER-1001",
                    "Amounts": {"Total": "10.00"},
                    "CardData": {"Number": "4111111111111111", "Expiration": "1230"},
                },
            })
            print(f"Charge status: {result.get('status')}")
        except ArgumentError as e:
            print(f"Invalid charge: {e}")
        except RequestError as e:
            print(f"Charge failed: {e.get_description()}")
            print(f"Response body: {e.body}")


# =============================================================================
# Example 4: SEVD Hosted Checkout
# =============================================================================

def sevd_sale_example() -> str:
    """Get a tokenized request for the hosted payment form"""
    factory = SevdClientFactory(logger)

    charge = factory.get("charge", {
        "application_id": "your-application-id",
        "client_id": "your-client-id",
        "client_secret": "your-client-secret",
        "merchant_id": "999999999997",
        "merchant_key": "your-merchant-key",
        "language_id": "EN",
    })

    return charge.ui_sale(
        {"Reference1": "ORDER-1001", "Amount": "25.00"},
        {
            "Name": {"FirstName": "Ada", "LastName": "Lovelace"},
            "Address": {"City": "London", "Country": "UK"},
        },
        capture=True,
        ui_settings={"edit_customer": True},
    )


if __name__ == "__main__":
    config = programmatic_config_example()
    direct_api_sale_example(config)
    print(sevd_sale_example())
