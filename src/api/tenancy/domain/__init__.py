"""Tenancy domain layer: franchises, business ownership and admin scope."""
