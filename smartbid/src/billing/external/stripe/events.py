"""
Stripe Webhook Event Variants

Verified webhook payloads parsed into one model per handled event type.
Anything else becomes an UnhandledEvent that is acknowledged and logged.
"""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError


CHECKOUT_SESSION_COMPLETED = 'checkout.session.completed'
SUBSCRIPTION_DELETED = 'customer.subscription.deleted'


class _StripeObject(BaseModel):
    model_config = ConfigDict(extra='ignore')


class CheckoutSession(_StripeObject):
    id: Optional[str] = None
    client_reference_id: Optional[str] = None  # our user id
    customer: Optional[str] = None  # Stripe customer id
    mode: Optional[str] = None


class StripeSubscription(_StripeObject):
    id: Optional[str] = None
    customer: Optional[str] = None
    status: Optional[str] = None


class _EventBase(_StripeObject):
    id: str
    created: Optional[int] = None
    livemode: bool = False


class CheckoutSessionCompletedEvent(_EventBase):
    type: Literal['checkout.session.completed']
    session: CheckoutSession

    @property
    def user_id(self) -> Optional[str]:
        return self.session.client_reference_id

    @property
    def customer_id(self) -> Optional[str]:
        return self.session.customer


class SubscriptionDeletedEvent(_EventBase):
    type: Literal['customer.subscription.deleted']
    subscription: StripeSubscription

    @property
    def customer_id(self) -> Optional[str]:
        return self.subscription.customer


class UnhandledEvent(_EventBase):
    type: str


WebhookEvent = Union[CheckoutSessionCompletedEvent, SubscriptionDeletedEvent, UnhandledEvent]


def parse_event(payload: Dict[str, Any]) -> WebhookEvent:
    """
    Parse a verified Stripe event payload into its variant.

    Raises:
        ValueError: If the payload is not a Stripe event or the handled
            event's object does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise ValueError("Webhook payload is not a JSON object")

    event_type = payload.get('type')
    data = payload.get('data')
    if data is not None and not isinstance(data, dict):
        raise ValueError("Webhook event data is not a JSON object")
    obj = (data or {}).get('object') or {}
    base = {k: payload.get(k) for k in ('id', 'type', 'created', 'livemode') if payload.get(k) is not None}

    try:
        if event_type == CHECKOUT_SESSION_COMPLETED:
            return CheckoutSessionCompletedEvent(**base, session=obj)
        if event_type == SUBSCRIPTION_DELETED:
            return SubscriptionDeletedEvent(**base, subscription=obj)
        return UnhandledEvent(**base)
    except ValidationError as e:
        raise ValueError(f"Malformed {event_type} event: {e.error_count()} validation error(s)") from e
