"""Domain-Oriented Observability for entitlements infrastructure."""

from entitlements.infrastructure.observability.subscription_probe import (
    DefaultSubscriptionRepositoryProbe,
    SubscriptionRepositoryProbe,
)

__all__ = [
    "DefaultSubscriptionRepositoryProbe",
    "SubscriptionRepositoryProbe",
]
