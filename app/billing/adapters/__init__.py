"""
Adapters for external billing services.

All Stripe API calls go through StripeAdapter so that error translation,
timeouts and logging stay consistent.

Usage:
    from billing.adapters import StripeAdapter, UpdateSubscriptionParams

    result = StripeAdapter.update_subscription(
        "sub_xxx",
        UpdateSubscriptionParams(coupon="10OFF"),
    )
"""

from billing.adapters.stripe_adapter import (
    CreateCustomerParams,
    CreateSubscriptionParams,
    CustomerResult,
    InvoiceResult,
    PaymentMethodResult,
    StripeAdapter,
    SubscriptionResult,
    UpdateSubscriptionParams,
)

__all__ = [
    "CreateCustomerParams",
    "CreateSubscriptionParams",
    "CustomerResult",
    "InvoiceResult",
    "PaymentMethodResult",
    "StripeAdapter",
    "SubscriptionResult",
    "UpdateSubscriptionParams",
]
