"""Domain entities for billing module."""

from .usage_record import UsageRecord

__all__ = [
    'UsageRecord',
]
