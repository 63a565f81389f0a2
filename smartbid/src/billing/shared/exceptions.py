"""
Billing Exceptions

Custom exception classes for billing and usage-metering errors.
Each carries the HTTP status the endpoints translate it to.
"""


class BillingError(Exception):
    """
    Base exception for all billing-related errors.

    All billing exceptions inherit from this class, allowing for
    broad exception handling when needed.
    """

    status_code: int = 500

    def __init__(self, message: str, code: str = "BILLING_ERROR", details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class BillingConfigurationError(BillingError):
    """Raised when a required billing secret or client is not configured."""

    status_code = 500

    def __init__(self, message: str = "Billing is not configured", setting: str = None):
        super().__init__(
            message=message,
            code="BILLING_NOT_CONFIGURED",
            details={'setting': setting} if setting else {}
        )
        self.setting = setting


class BillingCustomerNotFoundError(BillingError):
    """Raised when a user has no billing customer linked to their usage record."""

    status_code = 404

    def __init__(self, user_id: str):
        super().__init__(
            message="No subscription found for this user.",
            code="BILLING_CUSTOMER_NOT_FOUND",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class WebhookError(BillingError):
    """
    Raised when there's an issue processing a webhook.

    Examples:
        - Missing or invalid signature
        - Undecodable payload
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Webhook processing error",
        code: str = "WEBHOOK_ERROR",
        event_id: str = None,
        event_type: str = None
    ):
        details = {}
        if event_id:
            details['event_id'] = event_id
        if event_type:
            details['event_type'] = event_type

        super().__init__(
            message=message,
            code=code,
            details=details
        )
        self.event_id = event_id
        self.event_type = event_type


class UsageConflictError(BillingError):
    """
    Raised when the usage counter transaction aborts.

    The increment must be treated as not having happened.
    """

    status_code = 409

    def __init__(self, user_id: str, counter_key: str, reason: str = None):
        super().__init__(
            message="Usage update conflicted; the action was not counted",
            code="USAGE_CONFLICT",
            details={'user_id': user_id, 'counter_key': counter_key, 'reason': reason}
        )
        self.user_id = user_id
        self.counter_key = counter_key


class TrialLimitReachedError(BillingError):
    """Raised when a metered action is attempted past the free trial limit."""

    status_code = 402

    def __init__(self, user_id: str, used: int, limit: int):
        super().__init__(
            message="Free trial limit reached. Subscribe to continue.",
            code="TRIAL_LIMIT_REACHED",
            details={'user_id': user_id, 'used': used, 'limit': limit}
        )
        self.user_id = user_id
        self.used = used
        self.limit = limit
