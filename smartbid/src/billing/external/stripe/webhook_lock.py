"""
Webhook Lock and Deduplication

Tracks webhook events in the usage store's ledger so that Stripe
redeliveries of an already-processed event are skipped.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from smartbid.src.billing.usage.store import UsageStore

logger = logging.getLogger(__name__)

# Seconds after which an event stuck in 'processing' may be retried
PROCESSING_STALE_AFTER = 300


class WebhookLock:
    """
    Webhook ledger for preventing duplicate processing.

    Statuses: processing -> completed | failed. Failed and stale
    processing events may be picked up again.
    """

    def __init__(self, store: UsageStore):
        self.store = store

    async def check_and_mark_webhook_processing(
        self,
        event_id: str,
        event_type: str,
    ) -> Tuple[bool, str]:
        """
        Check if a webhook can be processed and mark it as in-progress.

        Args:
            event_id: Stripe event ID
            event_type: Type of webhook event

        Returns:
            Tuple of (can_process: bool, reason: str)
        """
        try:
            existing = await self.store.get_webhook_event(event_id)

            if existing:
                status = existing.get('status')
                if status == 'completed':
                    return False, "Event already processed"
                if status == 'processing':
                    age = self._age_seconds(existing.get('startedAt'))
                    if age is not None and age < PROCESSING_STALE_AFTER:
                        return False, "Event currently being processed"
                    logger.warning(f"[WEBHOOK LOCK] Event {event_id} stuck in processing, allowing retry")
                elif status == 'failed':
                    logger.info(f"[WEBHOOK LOCK] Retrying failed event {event_id}")

            await self.store.put_webhook_event(event_id, {
                'eventType': event_type,
                'status': 'processing',
                'startedAt': datetime.now(timezone.utc).isoformat(),
            })
            return True, "Processing"

        except Exception as e:
            # Prefer duplicate processing over dropping; handlers are idempotent
            logger.error(f"[WEBHOOK LOCK] Error checking/marking event {event_id}: {e}")
            return True, f"Lock error: {e}"

    async def mark_webhook_completed(self, event_id: str) -> bool:
        """Mark a webhook event as successfully processed."""
        try:
            await self.store.put_webhook_event(event_id, {
                'status': 'completed',
                'completedAt': datetime.now(timezone.utc).isoformat(),
            })
            logger.debug(f"[WEBHOOK LOCK] Marked event {event_id} as completed")
            return True
        except Exception as e:
            logger.error(f"[WEBHOOK LOCK] Error marking event {event_id} completed: {e}")
            return False

    async def mark_webhook_failed(self, event_id: str, error_message: str) -> bool:
        """Mark a webhook event as failed so a redelivery can retry it."""
        try:
            await self.store.put_webhook_event(event_id, {
                'status': 'failed',
                'errorMessage': error_message[:1000],
                'completedAt': datetime.now(timezone.utc).isoformat(),
            })
            logger.warning(f"[WEBHOOK LOCK] Marked event {event_id} as failed: {error_message[:100]}")
            return True
        except Exception as e:
            logger.error(f"[WEBHOOK LOCK] Error marking event {event_id} failed: {e}")
            return False

    @staticmethod
    def _age_seconds(started_at: Optional[str]) -> Optional[float]:
        if not started_at:
            return None
        try:
            started = datetime.fromisoformat(started_at)
        except (TypeError, ValueError):
            return None
        return (datetime.now(timezone.utc) - started).total_seconds()
