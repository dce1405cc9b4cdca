"""
Subscription service driving the Stripe subscription lifecycle.

Every operation is a remote Stripe call followed by a write to the local
StripeSubscription mirror:

    create:               create remote -> insert local record
    coupon / cancel:      retrieve remote -> update remote -> overwrite local status

Stripe is the source of truth. The status Stripe returns is written as-is;
nothing here computes or validates subscription status. Remote failures
propagate before any local write. If the local write fails after a remote
success the two stay divergent until the next successful call; nothing is
rolled back.

Usage:
    from billing.services import SubscriptionService

    service = SubscriptionService()

    subscription = service.create_subscription_with_payment_method_id(
        user_id=user.pk,
        plan_id="price_basic",
        payment_method_id="pm_xxx",
        quantity=1,
    )
    service.apply_coupon_to_subscription(subscription.id, "10OFF")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from billing.adapters import (
    CreateSubscriptionParams,
    StripeAdapter,
    UpdateSubscriptionParams,
)
from billing.exceptions import SubscriptionRecordNotFoundError
from billing.models import StripeSubscription
from billing.repositories import DjangoSubscriptionRepository
from billing.services.customer_service import CustomerService

if TYPE_CHECKING:
    from datetime import datetime
    from typing import Any

    from billing.adapters import SubscriptionResult
    from billing.protocols import SubscriptionRepository


logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Orchestrates subscription lifecycle calls and keeps the local mirror in
    step with Stripe.

    Dependency Injection:
        The customer service, the subscription store and the Stripe adapter
        can all be injected for testing.
    """

    def __init__(
        self,
        customer_service: CustomerService | None = None,
        subscription_repository: SubscriptionRepository | None = None,
        stripe_adapter: type | None = None,
    ):
        self.stripe = stripe_adapter or StripeAdapter
        self.customers = customer_service or CustomerService(stripe_adapter=self.stripe)
        self.subscriptions = subscription_repository or DjangoSubscriptionRepository()

    # =========================================================================
    # Creation
    # =========================================================================

    def create_subscription_with_payment_method_id(
        self,
        user_id: Any,
        plan_id: str,
        payment_method_id: str,
        quantity: int = 1,
    ) -> SubscriptionResult:
        """
        Create a subscription paid with an existing payment method.

        Steps:
        1. Resolve (or create) the user's Stripe customer
        2. Create the Stripe subscription
        3. Insert the local record with Stripe's ID and status

        The customer ID comes from the stored StripeCustomerLink without a
        Stripe retrieve. A link to a customer deleted in Stripe therefore
        surfaces only as a StripeInvalidRequestError from step 2.

        Args:
            user_id: Host user identifier
            plan_id: Stripe plan or price ID
            payment_method_id: Default payment method for the subscription
            quantity: Units of the plan (default: 1)

        Returns:
            The created SubscriptionResult

        Raises:
            ValueError: Invalid plan_id or quantity
            StripeError: Stripe call failed; no local record is written
        """
        customer_id = self.customers.get_or_create_linked_customer(
            user_id
        ).stripe_customer_id

        subscription = self.stripe.create_subscription(
            CreateSubscriptionParams(
                customer_id=customer_id,
                plan_id=plan_id,
                quantity=quantity,
                default_payment_method=payment_method_id,
            )
        )

        self.subscriptions.insert(
            StripeSubscription(
                stripe_customer_id=customer_id,
                stripe_subscription_id=subscription.id,
                plan_id=plan_id,
                status=subscription.status,
            )
        )

        logger.info(
            "Subscription created",
            extra={
                "user_id": str(user_id),
                "customer_id": customer_id,
                "stripe_subscription_id": subscription.id,
                "plan_id": plan_id,
                "status": subscription.status,
            },
        )
        return subscription

    def create_subscription_with_token(
        self,
        user_id: Any,
        plan_id: str,
        token: str,
        quantity: int = 1,
    ) -> SubscriptionResult:
        """
        Create a subscription paid with a new card token.

        The token is turned into a payment method attached to the user's
        customer, then the subscription is created with it. If creation
        fails the attached payment method stays on the customer.

        Raises:
            StripeError: Token exchange or subscription creation failed
        """
        payment_method = self.customers.add_payment_method_to_customer(user_id, token)
        return self.create_subscription_with_payment_method_id(
            user_id, plan_id, payment_method.id, quantity
        )

    # =========================================================================
    # Lifecycle Updates
    # =========================================================================

    def apply_coupon_to_subscription(
        self,
        subscription_id: str,
        coupon_code: str,
    ) -> SubscriptionResult:
        """
        Apply a coupon to a subscription.

        Raises:
            StripeError: Stripe call failed; local record untouched
            SubscriptionRecordNotFoundError: Stripe accepted the coupon but
                there is no local record
        """
        return self._update_and_mirror(
            subscription_id,
            UpdateSubscriptionParams(coupon=coupon_code),
        )

    def cancel_subscription_at_date(
        self,
        subscription_id: str,
        cancel_at: datetime,
    ) -> SubscriptionResult:
        """
        Schedule cancellation at an absolute, timezone-aware time.

        Clears any pending cancel-at-period-end flag.

        Raises:
            StripeError: Stripe call failed; local record untouched
            SubscriptionRecordNotFoundError: Stripe accepted the change but
                there is no local record
        """
        return self._update_and_mirror(
            subscription_id,
            UpdateSubscriptionParams(cancel_at_period_end=False, cancel_at=cancel_at),
        )

    def cancel_subscription_at_period_end(
        self,
        subscription_id: str,
    ) -> SubscriptionResult:
        """
        Schedule cancellation at the end of the current billing period.

        Only the status Stripe returns is mirrored; the scheduled
        cancellation itself is not stored locally.

        Raises:
            StripeError: Stripe call failed; local record untouched
            SubscriptionRecordNotFoundError: Stripe accepted the change but
                there is no local record
        """
        return self._update_and_mirror(
            subscription_id,
            UpdateSubscriptionParams(cancel_at_period_end=True),
        )

    def _update_and_mirror(
        self,
        subscription_id: str,
        params: UpdateSubscriptionParams,
    ) -> SubscriptionResult:
        """
        Fetch, update remotely, then overwrite the local status.
        """
        current = self.stripe.retrieve_subscription(subscription_id)
        updated = self.stripe.update_subscription(current.id, params)

        record = self.subscriptions.find_by_subscription_id(updated.id)
        if record is None:
            logger.error(
                "Local subscription record missing after Stripe update",
                extra={
                    "stripe_subscription_id": updated.id,
                    "status": updated.status,
                },
            )
            raise SubscriptionRecordNotFoundError(
                f"No local record for subscription {updated.id}",
                details={"stripe_subscription_id": updated.id},
            )

        previous_status = record.status
        record.status = updated.status
        self.subscriptions.update(record)

        logger.info(
            "Subscription mirror updated",
            extra={
                "stripe_subscription_id": updated.id,
                "previous_status": previous_status,
                "status": updated.status,
            },
        )
        return updated
