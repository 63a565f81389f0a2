from fastapi import APIRouter, Request

from smartbid.app.audit.api.router import v1 as audit_v1
from smartbid.core.conf import settings
from smartbid.src.billing.endpoints import billing_router

router = APIRouter(prefix=settings.FASTAPI_API_PATH)

router.include_router(audit_v1)
router.include_router(billing_router, tags=['Billing'])


@router.get('/health', tags=['Health'])
async def health_check(request: Request) -> dict:
    """Liveness plus which integrations are usable."""
    state = request.app.state
    return {
        'status': 'ok',
        'environment': settings.ENVIRONMENT,
        'documentStore': state.usage_store is not None and state.report_store is not None,
        'stripe': state.stripe_api.configured,
        'llm': state.llm_client.configured,
    }
