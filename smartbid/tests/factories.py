"""Test data builders: Stripe events and signatures, Gemini responses."""

import hashlib
import hmac
import json
import time

import httpx

from smartbid.app.audit.service.llm_service import GeminiClient
from smartbid.src.billing.shared.config import CounterKey
from smartbid.src.billing.shared.exceptions import UsageConflictError
from smartbid.src.billing.usage import InMemoryUsageStore

WEBHOOK_SECRET = 'whsec_test_secret'


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a stripe-signature header the way Stripe does."""
    timestamp = timestamp or int(time.time())
    signed = f'{timestamp}.{payload}'.encode('utf-8')
    signature = hmac.new(secret.encode('utf-8'), signed, hashlib.sha256).hexdigest()
    return f't={timestamp},v1={signature}'


def stripe_event(event_id: str, event_type: str, obj: dict) -> str:
    return json.dumps({
        'id': event_id,
        'object': 'event',
        'type': event_type,
        'created': int(time.time()),
        'livemode': False,
        'data': {'object': obj},
    })


def checkout_completed(event_id: str, user_id: str = 'u1', customer: str = 'cus_1') -> str:
    return stripe_event(event_id, 'checkout.session.completed', {
        'id': 'cs_test_1',
        'object': 'checkout.session',
        'client_reference_id': user_id,
        'customer': customer,
        'mode': 'subscription',
    })


def subscription_deleted(event_id: str, customer: str = 'cus_1') -> str:
    return stripe_event(event_id, 'customer.subscription.deleted', {
        'id': 'sub_1',
        'object': 'subscription',
        'customer': customer,
        'status': 'canceled',
    })


def report_json(findings: list = None) -> dict:
    """A model report as the browser's response schema asks for it."""
    return {
        'executiveSummary': 'Bid covers most mandatory requirements.',
        'findings': findings if findings is not None else [
            {
                'requirementFromRFQ': 'ISO 9001 certification',
                'complianceScore': 1,
                'bidResponseSummary': 'Certificate attached.',
                'flag': 'COMPLIANT',
                'category': 'TECHNICAL',
            },
            {
                'requirementFromRFQ': 'Net-30 payment terms',
                'complianceScore': 0.5,
                'bidResponseSummary': 'Bidder proposes net-45.',
                'flag': 'PARTIAL',
                'category': 'FINANCIAL',
                'negotiationStance': 'Accept net-45 only with a 2% early-payment discount.',
            },
        ],
    }


def gemini_response(payload: dict) -> dict:
    return {'candidates': [{'content': {'role': 'model', 'parts': [{'text': json.dumps(payload)}]}}]}


def make_gemini_client(handler, *, api_key: str = 'test-google-key', max_attempts: int = 3) -> GeminiClient:
    return GeminiClient(
        api_key,
        'gemini-test',
        'https://gemini.test/v1beta',
        max_attempts=max_attempts,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )


class ConflictingUsageStore(InMemoryUsageStore):
    """Usage store whose counter transaction always aborts."""

    async def increment(self, user_id: str, counter_key: CounterKey):
        raise UsageConflictError(user_id, CounterKey(counter_key).value, reason='too much contention')
