"""
Billing services.

This module provides:
- CustomerService: Host user -> Stripe customer resolution and payment methods
- SubscriptionService: Subscription lifecycle with local status mirroring
- InvoiceService: Upcoming invoice lookup

Usage:
    from billing.services import InvoiceService, SubscriptionService

    subscription = SubscriptionService().create_subscription_with_token(
        user_id=user.pk,
        plan_id="price_basic",
        token="tok_visa",
    )

    invoice = InvoiceService().get_next_invoice(user.pk)
    if invoice is not None:
        print(invoice.amount_due)
"""

from billing.services.customer_service import CustomerService
from billing.services.invoice_service import InvoiceService
from billing.services.subscription_service import SubscriptionService

__all__ = [
    "CustomerService",
    "InvoiceService",
    "SubscriptionService",
]
