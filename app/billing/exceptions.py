"""
Billing exceptions.

Exception Hierarchy:
    BillingError (base for the billing domain)
    ├── SubscriptionRecordNotFoundError - Local mirror missing for a subscription
    └── StripeError - Base for all Stripe failures (remote communication)
        ├── StripeCardDeclinedError - Card declined (permanent)
        ├── StripeInvalidRequestError - Invalid parameters or unknown resource (permanent)
        ├── StripeAuthenticationError - Bad or missing API key (permanent)
        ├── StripeRateLimitError - Rate limited (transient)
        └── StripeAPIUnavailableError - Network or Stripe server error (transient)

StripeError subclasses are raised only by billing.adapters.StripeAdapter.
Services let them propagate unchanged and never retry.

Usage:
    from billing.exceptions import StripeError, SubscriptionRecordNotFoundError

    try:
        service.cancel_subscription_at_period_end("sub_123")
    except SubscriptionRecordNotFoundError:
        # Stripe already accepted the cancellation
        ...
    except StripeError as e:
        if e.is_retryable:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, NotFoundError

if TYPE_CHECKING:
    from typing import Any


class BillingError(BaseApplicationError):
    """Base exception for all billing operations."""

    default_error_code: str = "BILLING_ERROR"


class SubscriptionRecordNotFoundError(BillingError, NotFoundError):
    """
    Raised when the local StripeSubscription row for a subscription is missing.

    The Stripe-side mutation has already been applied when this is raised;
    the local mirror catches up on the next successful lifecycle call.

    Example:
        raise SubscriptionRecordNotFoundError(
            "No local record for subscription sub_123",
            details={"stripe_subscription_id": "sub_123"},
        )
    """

    default_error_code: str = "SUBSCRIPTION_RECORD_NOT_FOUND"


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(BillingError):
    """
    Base exception for all Stripe API failures.

    Attributes:
        stripe_code: Stripe's error code (e.g. resource_missing)
        decline_code: Card decline code, if any
        is_retryable: Whether the same request could succeed later
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


class StripeCardDeclinedError(StripeError):
    """
    Card was declined while creating or attaching a payment method.

    The decline_code attribute carries the issuer's reason.
    """

    default_error_code: str = "CARD_DECLINED"


class StripeInvalidRequestError(StripeError):
    """
    Stripe rejected the request parameters.

    Covers unknown subscription, customer, plan or coupon ids as well as
    malformed parameters. Retrying the same request will not succeed.
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"


class StripeAuthenticationError(StripeError):
    """STRIPE_SECRET_KEY is missing or invalid."""

    default_error_code: str = "STRIPE_AUTHENTICATION_FAILED"


class StripeRateLimitError(StripeError):
    """Rate limited by the Stripe API."""

    default_error_code: str = "STRIPE_RATE_LIMITED"
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """
    Stripe could not be reached or returned a server error.

    The request may or may not have been applied on Stripe's side.
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"
    is_retryable: bool = True


__all__ = [
    "BillingError",
    "SubscriptionRecordNotFoundError",
    "StripeError",
    "StripeCardDeclinedError",
    "StripeInvalidRequestError",
    "StripeAuthenticationError",
    "StripeRateLimitError",
    "StripeAPIUnavailableError",
]
