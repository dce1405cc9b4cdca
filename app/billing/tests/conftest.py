"""
Pytest fixtures for billing service tests.

The Stripe adapter is replaced by a MagicMock returning adapter result
dataclasses; local stores use the Django ORM unless a test needs otherwise.
stripe_sdk instead patches the SDK itself and keeps the real adapter.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from billing.adapters import CustomerResult, InvoiceResult, PaymentMethodResult
from billing.adapters.tests.stripe_objects import (
    build_customer,
    build_payment_method,
    build_subscription,
)
from billing.repositories import DjangoSubscriptionRepository
from billing.services import CustomerService, InvoiceService, SubscriptionService
from billing.tests.doubles import make_subscription_result


# =============================================================================
# Mock Stripe Adapter
# =============================================================================


@pytest.fixture
def mock_stripe_adapter():
    """Mock Stripe adapter class for service tests."""
    mock = MagicMock()

    mock.create_customer.return_value = CustomerResult(id="cus_u1")
    mock.retrieve_customer.return_value = CustomerResult(
        id="cus_u1", metadata={"user_id": "u1"}
    )

    mock.create_payment_method_from_token.return_value = PaymentMethodResult(
        id="pm_from_token", type="card", card_brand="visa", card_last4="4242"
    )
    mock.attach_payment_method.return_value = PaymentMethodResult(
        id="pm_from_token", type="card", customer_id="cus_u1"
    )
    mock.detach_payment_method.return_value = PaymentMethodResult(
        id="pm_from_token", type="card"
    )
    mock.set_default_payment_method.return_value = CustomerResult(
        id="cus_u1", default_payment_method="pm_from_token"
    )

    mock.create_subscription.return_value = make_subscription_result()
    mock.retrieve_subscription.return_value = make_subscription_result()
    mock.update_subscription.return_value = make_subscription_result()

    mock.retrieve_upcoming_invoice.return_value = InvoiceResult(
        id="upcoming_in_1",
        customer_id="cus_u1",
        amount_due=1999,
        currency="usd",
    )
    return mock


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def customer_service(db, mock_stripe_adapter):
    """CustomerService using the ORM link store and the mock adapter."""
    return CustomerService(stripe_adapter=mock_stripe_adapter)


@pytest.fixture
def subscription_repository(db):
    """ORM subscription store wrapped so calls can be asserted."""
    return MagicMock(wraps=DjangoSubscriptionRepository())


@pytest.fixture
def subscription_service(customer_service, subscription_repository, mock_stripe_adapter):
    """SubscriptionService wired to the ORM stores and the mock adapter."""
    return SubscriptionService(
        customer_service=customer_service,
        subscription_repository=subscription_repository,
        stripe_adapter=mock_stripe_adapter,
    )


@pytest.fixture
def invoice_service(customer_service, mock_stripe_adapter):
    """InvoiceService wired to the mock adapter."""
    return InvoiceService(
        customer_service=customer_service,
        stripe_adapter=mock_stripe_adapter,
    )


# =============================================================================
# Stripe SDK Fixtures
# =============================================================================


@pytest.fixture
def stripe_sdk():
    """
    Patch the stripe resources the real StripeAdapter calls.

    Each mock answers with real SDK objects, so services wired to the
    default adapter exercise its response mapping end to end.
    """
    with (
        patch("stripe.RequestsClient"),
        patch("stripe.Customer") as customer,
        patch("stripe.PaymentMethod") as payment_method,
        patch("stripe.Subscription") as subscription,
    ):
        customer.create.return_value = build_customer(
            id="cus_new", metadata={"user_id": "u1"}
        )
        customer.modify.return_value = build_customer(
            id="cus_new", default_payment_method="pm_tok"
        )
        payment_method.create.return_value = build_payment_method(id="pm_tok")
        payment_method.attach.return_value = build_payment_method(
            id="pm_tok", customer="cus_new"
        )
        subscription.create.return_value = build_subscription(
            id="sub_new", status="incomplete", customer="cus_new"
        )
        yield SimpleNamespace(
            Customer=customer,
            PaymentMethod=payment_method,
            Subscription=subscription,
        )


@pytest.fixture
def live_subscription_service(db, stripe_sdk):
    """SubscriptionService with every default collaborator."""
    return SubscriptionService()
