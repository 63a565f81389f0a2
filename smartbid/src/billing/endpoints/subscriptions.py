"""
Subscription Endpoints

Customer portal access for subscribed users.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from smartbid.src.billing.shared.exceptions import BillingError
from smartbid.src.billing.subscriptions import PortalHandler
from .dependencies import get_portal_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing-subscriptions"])


class CreatePortalRequest(BaseModel):
    """Request for customer portal session."""
    user_id: str = Field(alias='userId', min_length=1)


@router.post("/create-portal-session")
async def create_portal_session(
    request: CreatePortalRequest,
    portal_handler: PortalHandler = Depends(get_portal_handler),
) -> Dict:
    """Create Stripe customer portal session."""
    try:
        url = await portal_handler.create_portal_session(request.user_id)
    except BillingError as e:
        if e.status_code >= 500:
            logger.error(f"[BILLING] Error creating portal: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {'url': url}
