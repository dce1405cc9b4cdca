"""
Django ORM implementations of the billing store protocols.

Usage:
    from billing.repositories import DjangoSubscriptionRepository

    repository = DjangoSubscriptionRepository()
    record = repository.find_by_subscription_id("sub_xxx")
"""

from __future__ import annotations

from billing.models import StripeCustomerLink, StripeSubscription


class DjangoSubscriptionRepository:
    """SubscriptionRepository backed by the StripeSubscription model."""

    def insert(self, record: StripeSubscription) -> StripeSubscription:
        record.save(force_insert=True)
        return record

    def update(self, record: StripeSubscription) -> StripeSubscription:
        # Raises DatabaseError if the row no longer exists
        record.save(force_update=True)
        return record

    def find_by_subscription_id(
        self, stripe_subscription_id: str
    ) -> StripeSubscription | None:
        return StripeSubscription.objects.filter(
            stripe_subscription_id=stripe_subscription_id
        ).first()


class DjangoCustomerLinkRepository:
    """CustomerLinkRepository backed by the StripeCustomerLink model."""

    def find_by_user_id(self, user_id: str) -> StripeCustomerLink | None:
        return StripeCustomerLink.objects.filter(user_id=user_id).first()

    def insert(self, link: StripeCustomerLink) -> StripeCustomerLink:
        link.save(force_insert=True)
        return link
