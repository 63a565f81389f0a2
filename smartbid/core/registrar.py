"""Application factory: logging, middleware, routers and service lifecycle."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from google.auth.exceptions import GoogleAuthError

from smartbid.app.audit.crud.crud_report import FirestoreReportStore, InMemoryReportStore, ReportStore
from smartbid.app.audit.service.llm_service import GeminiClient
from smartbid.core.conf import settings
from smartbid.database.firestore import close_firestore_client, create_firestore_client
from smartbid.src.billing.external.stripe import StripeAPIWrapper
from smartbid.src.billing.usage import FirestoreUsageStore, InMemoryUsageStore, UsageStore

logger = logging.getLogger(__name__)


def register_logger() -> None:
    logging.basicConfig(level=settings.LOG_STD_LEVEL.upper(), format=settings.LOG_FORMAT)


def create_llm_client() -> GeminiClient:
    return GeminiClient(
        settings.GOOGLE_API_KEY,
        settings.GEMINI_MODEL,
        settings.GEMINI_API_BASE_URL,
        max_attempts=settings.LLM_MAX_ATTEMPTS,
        backoff_base=settings.LLM_RETRY_BASE_DELAY,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


async def _open_stores(app: FastAPI) -> None:
    """Attach document stores not injected by the caller."""
    state = app.state
    if state.usage_store is not None and state.report_store is not None:
        return

    try:
        client = create_firestore_client()
    except (ValueError, GoogleAuthError) as e:
        logger.error(f'[STARTUP] Invalid FIREBASE_SERVICE_ACCOUNT, Firestore disabled: {e}', exc_info=True)
        client = None
    app.state.firestore_client = client
    if client is not None:
        if state.usage_store is None:
            state.usage_store = FirestoreUsageStore(
                client, settings.APP_ID, max_attempts=settings.USAGE_TRANSACTION_MAX_ATTEMPTS
            )
        if state.report_store is None:
            state.report_store = FirestoreReportStore(client, settings.APP_ID)
    elif settings.ENVIRONMENT == 'dev':
        logger.warning('[STARTUP] Firestore unavailable; using in-memory stores (data is not persisted)')
        if state.usage_store is None:
            state.usage_store = InMemoryUsageStore()
        if state.report_store is None:
            state.report_store = InMemoryReportStore()
    else:
        logger.error('[STARTUP] Firestore unavailable; usage and report endpoints will fail')


@asynccontextmanager
async def register_init(app: FastAPI):
    """Open services on startup and release them on shutdown."""
    await _open_stores(app)
    if not settings.stripe_configured:
        logger.warning('[STARTUP] STRIPE_SECRET_KEY not set; portal sessions are disabled')
    if not settings.llm_configured:
        logger.warning('[STARTUP] GOOGLE_API_KEY not set; /analyze will fail')

    yield

    for name in ('usage_store', 'report_store', 'llm_client'):
        service = getattr(app.state, name, None)
        if service is not None:
            await service.close()
    await close_firestore_client(getattr(app.state, 'firestore_client', None))


def register_app(
    *,
    usage_store: Optional[UsageStore] = None,
    report_store: Optional[ReportStore] = None,
    llm_client: Optional[GeminiClient] = None,
    stripe_api: Optional[StripeAPIWrapper] = None,
) -> FastAPI:
    """Create the FastAPI app.

    Services passed in are used as-is; the rest are created from settings
    during startup.
    """
    register_logger()

    app = FastAPI(
        title=settings.FASTAPI_TITLE,
        description=settings.FASTAPI_DESCRIPTION,
        docs_url=settings.FASTAPI_DOCS_URL,
        openapi_url=settings.FASTAPI_OPENAPI_URL,
        lifespan=register_init,
    )

    app.state.usage_store = usage_store
    app.state.report_store = report_store
    app.state.llm_client = llm_client or create_llm_client()
    app.state.stripe_api = stripe_api or StripeAPIWrapper(settings.STRIPE_SECRET_KEY)
    app.state.firestore_client = None

    register_middleware(app)
    register_router(app)

    return app


def register_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials='*' not in settings.CORS_ALLOWED_ORIGINS,
        allow_methods=['*'],
        allow_headers=['*'],
    )


def register_router(app: FastAPI) -> None:
    from smartbid.app.router import router

    app.include_router(router)
