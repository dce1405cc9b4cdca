"""
Customer service resolving host users to Stripe customers.

Each host user identifier is linked to exactly one Stripe customer. The
link is created, together with the Stripe customer, the first time a user
is resolved.

Usage:
    from billing.services import CustomerService

    service = CustomerService()

    link = service.get_or_create_linked_customer(user.pk)
    payment_method = service.add_payment_method_to_customer(user.pk, "tok_visa")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from billing.adapters import CreateCustomerParams, StripeAdapter
from billing.models import StripeCustomerLink
from billing.repositories import DjangoCustomerLinkRepository

if TYPE_CHECKING:
    from typing import Any

    from billing.adapters import CustomerResult, PaymentMethodResult
    from billing.protocols import CustomerLinkRepository


logger = logging.getLogger(__name__)


class CustomerService:
    """
    Resolves host user identifiers to Stripe customers and manages their
    payment methods.

    Dependency Injection:
        Both the link store and the Stripe adapter can be injected for testing.
    """

    def __init__(
        self,
        link_repository: CustomerLinkRepository | None = None,
        stripe_adapter: type | None = None,
    ):
        """
        Args:
            link_repository: Store for user -> customer links
                (default: DjangoCustomerLinkRepository)
            stripe_adapter: Stripe adapter class (default: StripeAdapter)
        """
        self.links = link_repository or DjangoCustomerLinkRepository()
        self.stripe = stripe_adapter or StripeAdapter

    def get_or_create_linked_customer(self, user_id: Any) -> StripeCustomerLink:
        """
        Return the Stripe customer link for a user, creating it if absent.

        When the user has no link yet a Stripe customer is created with the
        user identifier in its metadata, then the link is stored.

        Args:
            user_id: Host user identifier (converted to str)

        Returns:
            The user's StripeCustomerLink

        Raises:
            StripeError: Customer creation failed (no link is stored)
        """
        user_key = str(user_id)
        link = self.links.find_by_user_id(user_key)
        if link is not None:
            return link

        customer = self.stripe.create_customer(CreateCustomerParams(user_id=user_key))
        link = self.links.insert(
            StripeCustomerLink(user_id=user_key, stripe_customer_id=customer.id)
        )

        logger.info(
            "Linked user to new Stripe customer",
            extra={"user_id": user_key, "customer_id": customer.id},
        )
        return link

    def get_or_create_customer(self, user_id: Any) -> CustomerResult:
        """
        Return the Stripe customer for a user, creating it if absent.

        Raises:
            StripeError: Stripe lookup or creation failed
        """
        link = self.get_or_create_linked_customer(user_id)
        return self.stripe.retrieve_customer(link.stripe_customer_id)

    def add_payment_method_to_customer(
        self,
        user_id: Any,
        token: str,
    ) -> PaymentMethodResult:
        """
        Turn a card token into a payment method owned by the user's customer.

        Steps:
        1. Resolve (or create) the user's Stripe customer
        2. Create a card PaymentMethod from the token
        3. Attach it to the customer
        4. Make it the customer's default for invoices

        Args:
            user_id: Host user identifier
            token: Stripe card token (tok_xxx)

        Returns:
            The attached PaymentMethodResult

        Raises:
            StripeError: Any step failed; earlier steps are not undone
        """
        customer_id = self.get_or_create_linked_customer(user_id).stripe_customer_id

        payment_method = self.stripe.create_payment_method_from_token(token)
        attached = self.stripe.attach_payment_method(payment_method.id, customer_id)
        self.stripe.set_default_payment_method(customer_id, attached.id)

        logger.info(
            "Payment method attached to customer",
            extra={
                "user_id": str(user_id),
                "customer_id": customer_id,
                "payment_method_id": attached.id,
            },
        )
        return attached

    def remove_payment_method(self, payment_method_id: str) -> PaymentMethodResult:
        """
        Detach a payment method from its customer.

        Raises:
            StripeError: Detach failed
        """
        detached = self.stripe.detach_payment_method(payment_method_id)
        logger.info(
            "Payment method detached",
            extra={"payment_method_id": payment_method_id},
        )
        return detached
