"""
Endpoint Dependencies

Providers for the billing services held on app.state.
Tests swap implementations by passing them to register_app().
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request

from smartbid.core.conf import settings
from smartbid.src.billing.external.stripe import StripeAPIWrapper, WebhookService
from smartbid.src.billing.subscriptions import PortalHandler
from smartbid.src.billing.usage import UsageService, UsageStore

logger = logging.getLogger(__name__)


def get_usage_store(request: Request) -> UsageStore:
    """The app's usage store, or 500 if no document store is configured."""
    store = getattr(request.app.state, 'usage_store', None)
    if store is None:
        logger.error("[BILLING] Usage store requested but no document store is configured")
        raise HTTPException(status_code=500, detail="Document store not configured")
    return store


def get_optional_usage_store(request: Request) -> Optional[UsageStore]:
    """The app's usage store, or None; for callers that must validate input first."""
    return getattr(request.app.state, 'usage_store', None)


def get_stripe_api(request: Request) -> StripeAPIWrapper:
    stripe_api = getattr(request.app.state, 'stripe_api', None)
    return stripe_api if stripe_api is not None else StripeAPIWrapper(settings.STRIPE_SECRET_KEY)


def get_usage_service(store: UsageStore = Depends(get_usage_store)) -> UsageService:
    return UsageService(store, limit=settings.BILLING_FREE_TRIAL_LIMIT)


def get_webhook_service(store: Optional[UsageStore] = Depends(get_optional_usage_store)) -> WebhookService:
    return WebhookService(
        store,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        tolerance=settings.STRIPE_WEBHOOK_TOLERANCE,
    )


def get_portal_handler(
    store: UsageStore = Depends(get_usage_store),
    stripe_api: StripeAPIWrapper = Depends(get_stripe_api),
) -> PortalHandler:
    return PortalHandler(store, stripe_api, return_url=settings.STRIPE_PORTAL_RETURN_URL)
