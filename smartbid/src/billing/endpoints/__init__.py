"""
Billing Endpoints Module

API routes for billing operations.

Routers:
- usage: Usage counters and gate state
- subscriptions: Customer portal sessions
- webhooks: Stripe webhook processing

Usage:
    from smartbid.src.billing.endpoints import billing_router

    app.include_router(billing_router, prefix="/api")
"""

from fastapi import APIRouter

from .usage import router as usage_router
from .subscriptions import router as subscriptions_router
from .webhooks import router as webhooks_router

# Create main billing router
billing_router = APIRouter()

# Include all sub-routers
billing_router.include_router(usage_router)
billing_router.include_router(subscriptions_router)
billing_router.include_router(webhooks_router)

__all__ = [
    'billing_router',
    'usage_router',
    'subscriptions_router',
    'webhooks_router',
]
