"""
Usage Endpoints

Read access to a user's metered usage and entitlement state.
"""

from typing import Dict

from fastapi import APIRouter, Depends

from smartbid.src.billing.usage import UsageService
from .dependencies import get_usage_service

router = APIRouter(tags=["billing-usage"])


@router.get("/usage/{user_id}")
async def get_usage(
    user_id: str,
    usage_service: UsageService = Depends(get_usage_service),
) -> Dict:
    """Usage counters, subscription flag, trial limit and whether the gate blocks."""
    usage = await usage_service.get_usage(user_id)
    return usage_service.summarize(usage)
