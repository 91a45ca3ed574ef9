"""Ports for the entitlements bounded context."""

from entitlements.ports.repositories import ISubscriptionRepository

__all__ = ["ISubscriptionRepository"]
