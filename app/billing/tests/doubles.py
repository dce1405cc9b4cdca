"""
Test doubles for billing service tests.

Usage:
    from billing.tests.doubles import InMemorySubscriptionRepository

    repository = InMemorySubscriptionRepository()
    service = SubscriptionService(subscription_repository=repository, ...)
"""

from billing.adapters import SubscriptionResult


class InMemorySubscriptionRepository:
    """Dict-backed SubscriptionRepository for tests that skip the database."""

    def __init__(self):
        self.records = {}

    def insert(self, record):
        self.records[record.stripe_subscription_id] = record
        return record

    def update(self, record):
        self.records[record.stripe_subscription_id] = record
        return record

    def find_by_subscription_id(self, stripe_subscription_id):
        return self.records.get(stripe_subscription_id)


class InMemoryCustomerLinkRepository:
    """Dict-backed CustomerLinkRepository for tests that skip the database."""

    def __init__(self):
        self.links = {}

    def find_by_user_id(self, user_id):
        return self.links.get(user_id)

    def insert(self, link):
        self.links[link.user_id] = link
        return link


def make_subscription_result(
    id: str = "sub_1",
    status: str = "active",
    customer_id: str = "cus_u1",
    cancel_at_period_end: bool = False,
    cancel_at: int | None = None,
) -> SubscriptionResult:
    """Build a SubscriptionResult as the mock adapter returns it."""
    return SubscriptionResult(
        id=id,
        status=status,
        customer_id=customer_id,
        cancel_at_period_end=cancel_at_period_end,
        cancel_at=cancel_at,
    )
