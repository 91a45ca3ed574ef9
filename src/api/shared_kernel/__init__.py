"""Shared Kernel module.

Components that both the tenancy and entitlements contexts depend on:
the resolved tenant context, owner token validation and the observation
context carried by every domain probe. Changes here affect both contexts.
"""
