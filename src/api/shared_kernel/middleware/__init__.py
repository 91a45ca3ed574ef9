"""Shared request-scoped values for cross-cutting concerns.

``TenantContext`` is the resolved tenant of a request, produced by the
tenant resolver and read by everything downstream of it.
"""
