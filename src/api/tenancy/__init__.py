"""Tenancy bounded context.

Derives the franchise (tenant) a request belongs to and verifies that a
principal's resource belongs to that franchise before anything reads or
writes it.
"""
