"""
Retry policy for failed Direct API requests

A retry budget is configured per response status code, with optional
per-endpoint overrides:

    {
        429: {"global": 2, "endpoints": {"charges": 1}},
        503: {"global": 1},
    }

Status codes without an entry are never retried.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from sage_payments.config.client_config import RetryRule


@dataclass(frozen=True)
class RetryPolicy:
    """Per-status-code retry budgets"""
    rules: Dict[int, RetryRule] = field(default_factory=dict)

    @classmethod
    def from_config(cls, retries: Optional[Mapping[int, RetryRule]]) -> "RetryPolicy":
        return cls(rules=dict(retries or {}))

    def limit_for(self, endpoint: str, status_code: int) -> int:
        """
        Number of retries allowed for the endpoint after the given status

        A non-zero endpoint override replaces the global limit; an override
        of 0 falls back to the global limit.
        """
        rule = self.rules.get(status_code)
        if rule is None:
            return 0

        override = rule.endpoints.get(endpoint)
        if override:
            return override
        return rule.global_limit

    def should_retry(self, endpoint: str, status_code: int, retry: int) -> bool:
        """
        Whether another attempt is allowed

        Args:
            endpoint: Endpoint of the request, relative to the base path
            status_code: Status code of the last response
            retry: Number of retries already made for the request
        """
        return self.limit_for(endpoint, status_code) > retry
