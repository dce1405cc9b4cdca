"""
Billing app wrapping the Stripe SDK for a host Django application.

This app handles:
- Linking host user identifiers to Stripe customers
- Attaching and detaching payment methods
- Subscription lifecycle (create, apply coupon, cancel) with a local status mirror
- Upcoming invoice lookup

Usage:
    from billing.services import CustomerService, SubscriptionService

    customers = CustomerService()
    subscriptions = SubscriptionService(customer_service=customers)

    subscription = subscriptions.create_subscription_with_token(
        user_id=user.pk,
        plan_id="price_basic",
        token="tok_visa",
    )
    subscriptions.cancel_subscription_at_period_end(subscription.id)
"""
