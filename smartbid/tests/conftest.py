"""Shared fixtures: in-memory stores, a fake Gemini endpoint and the app."""

import httpx
import pytest
from fastapi.testclient import TestClient

from smartbid.app.audit.crud.crud_report import InMemoryReportStore
from smartbid.core.conf import settings
from smartbid.src.billing.external.stripe import StripeAPIWrapper
from smartbid.src.billing.usage import InMemoryUsageStore
from smartbid.tests.factories import WEBHOOK_SECRET, gemini_response, make_gemini_client, report_json


@pytest.fixture
def usage_store():
    return InMemoryUsageStore()


@pytest.fixture
def report_store():
    return InMemoryReportStore()


@pytest.fixture
def gemini_calls():
    """Requests seen by the fake Gemini endpoint."""
    return []


@pytest.fixture
def llm_client(gemini_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        gemini_calls.append(request)
        return httpx.Response(200, json=gemini_response(report_json()))

    return make_gemini_client(handler)


@pytest.fixture
def webhook_secret(monkeypatch):
    monkeypatch.setattr(settings, 'STRIPE_WEBHOOK_SECRET', WEBHOOK_SECRET)
    return WEBHOOK_SECRET


@pytest.fixture
def client(usage_store, report_store, llm_client, webhook_secret):
    """TestClient over an app wired to in-memory stores."""
    from smartbid.core.registrar import register_app

    app = register_app(
        usage_store=usage_store,
        report_store=report_store,
        llm_client=llm_client,
        stripe_api=StripeAPIWrapper('sk_test_123'),
    )
    with TestClient(app) as test_client:
        yield test_client
