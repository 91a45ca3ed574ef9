"""Entitlements presentation layer."""

from entitlements.presentation.routes import router

__all__ = ["router"]
