"""
Invoice service for upcoming invoice lookups.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from billing.adapters import StripeAdapter
from billing.services.customer_service import CustomerService

if TYPE_CHECKING:
    from typing import Any

    from billing.adapters import InvoiceResult


class InvoiceService:
    """Read-only access to a user's Stripe invoices."""

    def __init__(
        self,
        customer_service: CustomerService | None = None,
        stripe_adapter: type | None = None,
    ):
        self.stripe = stripe_adapter or StripeAdapter
        self.customers = customer_service or CustomerService(stripe_adapter=self.stripe)

    def get_next_invoice(self, user_id: Any) -> InvoiceResult | None:
        """
        Return the next invoice Stripe will issue for a user.

        Resolving the user may create a Stripe customer as a side effect.

        Returns:
            InvoiceResult, or None when nothing is pending

        Raises:
            StripeError: Stripe call failed
        """
        customer_id = self.customers.get_or_create_linked_customer(
            user_id
        ).stripe_customer_id
        return self.stripe.retrieve_upcoming_invoice(customer_id)
