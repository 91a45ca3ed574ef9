"""Entitlements bounded context.

Turns a business's ownership and latest subscription record into a
derived access state. Nothing here is persisted.
"""
