"""
Local records mirrored from Stripe.

StripeSubscription is a denormalized projection of a Stripe subscription.
Stripe is the source of truth for its status; the row is created once when
the remote subscription is created and afterwards only its status changes.

StripeCustomerLink maps the host application's user identifier to the
Stripe customer created for that user.

Usage:
    from billing.models import StripeSubscription, SubscriptionStatus

    record = StripeSubscription(
        stripe_customer_id="cus_xxx",
        stripe_subscription_id="sub_xxx",
        plan_id="price_xxx",
        status=SubscriptionStatus.ACTIVE,
    )
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel


class SubscriptionStatus(models.TextChoices):
    """
    Subscription statuses reported by Stripe.

    Values are stored verbatim as Stripe returns them. The choices exist
    for display; statuses are never computed locally.
    """

    INCOMPLETE = "incomplete", "Incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired", "Incomplete expired"
    TRIALING = "trialing", "Trialing"
    ACTIVE = "active", "Active"
    PAST_DUE = "past_due", "Past due"
    CANCELED = "canceled", "Canceled"
    UNPAID = "unpaid", "Unpaid"
    PAUSED = "paused", "Paused"


class StripeSubscription(BaseModel):
    """
    Local mirror of a Stripe subscription.

    Fields:
        stripe_customer_id: Stripe Customer ID (cus_xxx)
        stripe_subscription_id: Stripe Subscription ID (sub_xxx), lookup key
        plan_id: Stripe plan/price the subscription was created with
        status: Last status reported by Stripe
    """

    stripe_customer_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Stripe Customer ID (cus_xxx)",
    )

    stripe_subscription_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe Subscription ID (sub_xxx)",
    )

    plan_id = models.CharField(
        max_length=255,
        help_text="Stripe plan or price ID the subscription was created with",
    )

    status = models.CharField(
        max_length=32,
        choices=SubscriptionStatus.choices,
        db_index=True,
        help_text="Subscription status as last reported by Stripe",
    )

    class Meta(BaseModel.Meta):
        verbose_name = "Stripe subscription"
        verbose_name_plural = "Stripe subscriptions"

    def __str__(self) -> str:
        return f"StripeSubscription({self.stripe_subscription_id}, {self.status})"


class StripeCustomerLink(BaseModel):
    """
    Maps a host user identifier to a Stripe customer.

    The user identifier is opaque to this app and stored as a string, so
    integer, UUID and string primary keys all work.

    Fields:
        user_id: Host application's user identifier
        stripe_customer_id: Stripe Customer ID (cus_xxx)
    """

    user_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Host application user identifier",
    )

    stripe_customer_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe Customer ID (cus_xxx)",
    )

    class Meta(BaseModel.Meta):
        verbose_name = "Stripe customer link"
        verbose_name_plural = "Stripe customer links"

    def __str__(self) -> str:
        return f"StripeCustomerLink({self.user_id} -> {self.stripe_customer_id})"
