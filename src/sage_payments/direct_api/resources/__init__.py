"""Direct API resources"""

from sage_payments.direct_api.resources.base import DirectApiResource
from sage_payments.direct_api.resources.api_health import ApiHealth
from sage_payments.direct_api.resources.charges import Charges
from sage_payments.direct_api.resources.credits import Credits

__all__ = [
    "DirectApiResource",
    "ApiHealth",
    "Charges",
    "Credits",
]
