"""Subscription management handlers."""

from .portal import PortalHandler

__all__ = [
    'PortalHandler',
]
