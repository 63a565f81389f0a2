"""SmartBid backend package.

Bid-compliance auditing service: relays audit prompts to Gemini, stores
compliance reports per user, and meters trial usage behind a Stripe
subscription.
"""

__version__ = '0.1.0'
