"""
Protocol definitions for the billing app's local stores.

Services depend on these protocols rather than on the ORM, so a host
application can plug in its own persistence. billing.repositories provides
the Django ORM implementations used by default.

Available Protocols:
    SubscriptionRepository: Local StripeSubscription mirror
    CustomerLinkRepository: Host user -> Stripe customer mapping

Usage:
    from billing.protocols import SubscriptionRepository

    def mirror_status(repository: SubscriptionRepository, subscription_id, status):
        record = repository.find_by_subscription_id(subscription_id)
        record.status = status
        repository.update(record)

Note:
    The services issue read-then-write sequences without compare-and-swap.
    Implementations that need per-key exclusion must provide it themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from billing.models import StripeCustomerLink, StripeSubscription


@runtime_checkable
class SubscriptionRepository(Protocol):
    """
    Store for local subscription records keyed by Stripe subscription ID.
    """

    def insert(self, record: StripeSubscription) -> StripeSubscription:
        """
        Persist a new record.

        Args:
            record: Unsaved StripeSubscription

        Returns:
            The stored record
        """
        ...

    def update(self, record: StripeSubscription) -> StripeSubscription:
        """
        Persist changes to an existing record.

        Args:
            record: Previously stored StripeSubscription

        Returns:
            The stored record
        """
        ...

    def find_by_subscription_id(
        self, stripe_subscription_id: str
    ) -> StripeSubscription | None:
        """
        Look up a record by its Stripe subscription ID.

        Returns:
            The record, or None if absent
        """
        ...


@runtime_checkable
class CustomerLinkRepository(Protocol):
    """
    Store for host user -> Stripe customer links.
    """

    def find_by_user_id(self, user_id: str) -> StripeCustomerLink | None:
        """Look up the link for a host user, or None if the user has none."""
        ...

    def insert(self, link: StripeCustomerLink) -> StripeCustomerLink:
        """Persist a new link."""
        ...
