"""
Pytest fixtures for Stripe adapter tests.

Responses are real stripe SDK objects (see stripe_objects), so the
adapter's mapping runs against the same types the API client returns.

Sections:
    - Mock Stripe Response Fixtures
    - Mock Stripe Error Fixtures
    - Mock Stripe Client Fixtures
"""

from unittest.mock import patch

import pytest
import stripe

from billing.adapters.tests.stripe_objects import (
    build_customer,
    build_invoice,
    build_payment_method,
    build_subscription,
)


# =============================================================================
# Mock Stripe Response Fixtures
# =============================================================================


@pytest.fixture
def mock_customer():
    """Factory for Customer responses."""
    return build_customer


@pytest.fixture
def mock_payment_method():
    """Factory for card PaymentMethod responses."""
    return build_payment_method


@pytest.fixture
def mock_subscription():
    """Factory for Subscription responses."""
    return build_subscription


@pytest.fixture
def mock_invoice():
    """Factory for upcoming Invoice responses."""
    return build_invoice


# =============================================================================
# Mock Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    """Create a Stripe CardError."""

    def _create(
        message: str = "Your card was declined.",
        code: str = "card_declined",
        decline_code: str | None = "generic_decline",
    ) -> stripe.CardError:
        error = stripe.CardError(
            message=message,
            param=None,
            code=code,
        )
        error.decline_code = decline_code
        return error

    return _create


@pytest.fixture
def invalid_request_error():
    """Create a Stripe InvalidRequestError."""

    def _create(
        message: str = "No such subscription: 'sub_missing'",
        param: str | None = "id",
        code: str = "resource_missing",
    ) -> stripe.InvalidRequestError:
        return stripe.InvalidRequestError(
            message=message,
            param=param,
            code=code,
        )

    return _create


@pytest.fixture
def rate_limit_error():
    """Create a Stripe RateLimitError."""
    return stripe.RateLimitError(
        message="Too many requests hit the API too quickly.",
    )


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError."""
    return stripe.APIConnectionError(
        message="Could not connect to Stripe.",
    )


@pytest.fixture
def api_error():
    """Create a Stripe APIError."""
    return stripe.APIError(
        message="Something went wrong on Stripe's end.",
    )


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(
        message="Invalid API Key provided.",
    )


# =============================================================================
# Mock Stripe Client Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def mock_stripe_http_client():
    """Keep the adapter from building a real HTTP client."""
    with patch("stripe.RequestsClient") as mock:
        yield mock


@pytest.fixture
def mock_stripe_customer(mock_customer):
    """Mock stripe.Customer API."""
    with patch("stripe.Customer") as mock:
        mock.create.return_value = mock_customer()
        mock.retrieve.return_value = mock_customer()
        mock.modify.return_value = mock_customer(default_payment_method="pm_test123")
        yield mock


@pytest.fixture
def mock_stripe_payment_method(mock_payment_method):
    """Mock stripe.PaymentMethod API."""
    with patch("stripe.PaymentMethod") as mock:
        mock.create.return_value = mock_payment_method()
        mock.attach.return_value = mock_payment_method(customer="cus_test123")
        mock.detach.return_value = mock_payment_method()
        yield mock


@pytest.fixture
def mock_stripe_subscription(mock_subscription):
    """Mock stripe.Subscription API."""
    with patch("stripe.Subscription") as mock:
        mock.create.return_value = mock_subscription()
        mock.retrieve.return_value = mock_subscription()
        mock.modify.return_value = mock_subscription()
        yield mock


@pytest.fixture
def mock_stripe_invoice(mock_invoice):
    """Mock stripe.Invoice API."""
    with patch("stripe.Invoice") as mock:
        mock.create_preview.return_value = mock_invoice()
        yield mock
