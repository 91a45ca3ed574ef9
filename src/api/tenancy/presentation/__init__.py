"""Tenancy presentation layer.

Routes are grouped by what they expose: the resolved tenant itself and
admin sessions.
"""

from __future__ import annotations

from fastapi import APIRouter

from tenancy.presentation import admin, tenant

router = APIRouter()

router.include_router(tenant.router)
router.include_router(admin.router)

__all__ = ["router"]
