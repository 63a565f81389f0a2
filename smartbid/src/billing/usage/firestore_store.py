"""
Firestore Usage Store

Usage records in Cloud Firestore. The counter increment runs inside a
Firestore transaction so concurrent requests from several tabs or devices
serialize through the database, not through application locks.
"""

import logging
from typing import Dict, Optional

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import firestore

from smartbid.src.billing.domain.usage_record import UsageRecord
from smartbid.src.billing.shared.config import (
    CounterKey,
    usage_doc_path,
    billing_customer_doc_path,
    webhook_event_doc_path,
)
from smartbid.src.billing.shared.exceptions import UsageConflictError
from .store import UsageStore

logger = logging.getLogger(__name__)


class FirestoreUsageStore(UsageStore):
    """
    UsageStore backed by a google.cloud.firestore.AsyncClient.

    Usage:
        store = FirestoreUsageStore(client, app_id='default-app-id')
        record = await store.increment('user-1', CounterKey.BIDDER)
    """

    def __init__(self, client: firestore.AsyncClient, app_id: str, max_attempts: int = 5):
        self._client = client
        self._app_id = app_id
        self._max_attempts = max_attempts

    def _usage_ref(self, user_id: str) -> firestore.AsyncDocumentReference:
        return self._client.document(usage_doc_path(self._app_id, user_id))

    async def get(self, user_id: str) -> Optional[UsageRecord]:
        snapshot = await self._usage_ref(user_id).get()
        if not snapshot.exists:
            return None
        return UsageRecord.from_dict(snapshot.to_dict())

    async def increment(self, user_id: str, counter_key: CounterKey) -> UsageRecord:
        counter_key = CounterKey(counter_key)
        usage_ref = self._usage_ref(user_id)
        transaction = self._client.transaction(max_attempts=self._max_attempts)

        @firestore.async_transactional
        async def _increment_in_transaction(transaction, ref) -> UsageRecord:
            snapshot = await ref.get(transaction=transaction)
            current = UsageRecord.from_dict(snapshot.to_dict() if snapshot.exists else None)
            updated = current.incremented(counter_key)
            # Full record write; merge keeps fields this service does not own
            transaction.set(ref, updated.to_dict(), merge=True)
            return updated

        try:
            updated = await _increment_in_transaction(transaction, usage_ref)
        except (GoogleAPICallError, ValueError) as e:
            logger.warning(f"[USAGE] Transaction aborted for {user_id}/{counter_key.value}: {e}")
            raise UsageConflictError(user_id, counter_key.value, reason=str(e)) from e

        logger.info(f"[USAGE] {user_id} {counter_key.value} -> {updated.get_counter(counter_key)}")
        return updated

    async def set_subscribed(self, user_id: str, is_subscribed: bool) -> None:
        await self._usage_ref(user_id).set({'isSubscribed': is_subscribed}, merge=True)

    async def link_billing_customer(self, user_id: str, customer_id: str) -> None:
        batch = self._client.batch()
        batch.set(
            self._usage_ref(user_id),
            {'isSubscribed': True, 'billingCustomerId': customer_id},
            merge=True,
        )
        batch.set(
            self._client.document(billing_customer_doc_path(self._app_id, customer_id)),
            {'userId': user_id},
            merge=True,
        )
        await batch.commit()

    async def find_user_by_billing_customer(self, customer_id: str) -> Optional[str]:
        snapshot = await self._client.document(
            billing_customer_doc_path(self._app_id, customer_id)
        ).get()
        if not snapshot.exists:
            return None
        return (snapshot.to_dict() or {}).get('userId')

    async def get_webhook_event(self, event_id: str) -> Optional[Dict]:
        snapshot = await self._client.document(webhook_event_doc_path(self._app_id, event_id)).get()
        return snapshot.to_dict() if snapshot.exists else None

    async def put_webhook_event(self, event_id: str, data: Dict) -> None:
        await self._client.document(webhook_event_doc_path(self._app_id, event_id)).set(data, merge=True)
