"""
Webhook Endpoints

Stripe webhook endpoint for processing billing events.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from smartbid.src.billing.external.stripe import WebhookService
from smartbid.src.billing.shared.exceptions import BillingError
from .dependencies import get_webhook_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing-webhooks"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    webhook_service: WebhookService = Depends(get_webhook_service),
) -> Response:
    """
    Process Stripe webhook events.

    Handles:
    - checkout.session.completed
    - customer.subscription.deleted

    Any verified event is acknowledged with an empty 200.
    """
    payload = await request.body()
    sig_header = request.headers.get('stripe-signature')

    try:
        await webhook_service.handle_webhook_event(payload, sig_header)
    except BillingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return Response(status_code=200)
