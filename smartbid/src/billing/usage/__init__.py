"""
Usage Metering Module

- store: UsageStore interface and in-memory implementation
- firestore_store: Firestore-backed UsageStore
- gate: Entitlement gate (pure)
- service: Gate + store for metered actions
"""

from .gate import is_blocked, remaining_trial_checks
from .store import UsageStore, InMemoryUsageStore
from .firestore_store import FirestoreUsageStore
from .service import UsageService

__all__ = [
    'is_blocked',
    'remaining_trial_checks',
    'UsageStore',
    'InMemoryUsageStore',
    'FirestoreUsageStore',
    'UsageService',
]
