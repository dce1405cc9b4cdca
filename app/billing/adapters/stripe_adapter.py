"""
Stripe API adapter for billing operations.

This module provides the StripeAdapter class which encapsulates every
Stripe API call made by the billing app: customers, payment methods,
subscriptions and upcoming invoices.

Features:
- Configurable transport timeout on all API calls
- Translation of SDK exceptions to billing.exceptions.StripeError subclasses
- Structured logging with timing metrics
- No automatic retries (max_network_retries = 0)

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- STRIPE_API_VERSION: Optional pinned API version

Usage:
    from billing.adapters import StripeAdapter, CreateSubscriptionParams

    result = StripeAdapter.create_subscription(
        CreateSubscriptionParams(
            customer_id="cus_xxx",
            plan_id="price_basic",
            quantity=1,
            default_payment_method="pm_xxx",
        )
    )

    result = StripeAdapter.update_subscription(
        result.id,
        UpdateSubscriptionParams(cancel_at_period_end=True),
    )
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, NoReturn

import stripe
from django.conf import settings

from billing.exceptions import (
    StripeAPIUnavailableError,
    StripeAuthenticationError,
    StripeCardDeclinedError,
    StripeInvalidRequestError,
    StripeRateLimitError,
)

if TYPE_CHECKING:
    from collections.abc import Callable


# Stripe error code returned when a customer has no upcoming invoice
UPCOMING_INVOICE_NONE = "invoice_upcoming_none"

# Code carried by the error raised when a retrieved customer is deleted
CUSTOMER_DELETED = "customer_deleted"


# =============================================================================
# Request Parameters
# =============================================================================


@dataclass
class CreateCustomerParams:
    """
    Parameters for creating a Stripe Customer.

    Attributes:
        user_id: Host user identifier, stored in the customer's metadata
        email: Optional customer email
        name: Optional customer name
        metadata: Extra key-value pairs to attach
    """

    user_id: str
    email: str | None = None
    name: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user_id is required")

    def to_stripe_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "metadata": {**self.metadata, "user_id": self.user_id},
        }
        if self.email:
            kwargs["email"] = self.email
        if self.name:
            kwargs["name"] = self.name
        return kwargs


@dataclass
class CreateSubscriptionParams:
    """
    Parameters for creating a Stripe Subscription.

    Attributes:
        customer_id: Stripe Customer ID (cus_xxx)
        plan_id: Stripe plan or price ID billed by the subscription
        quantity: Number of units of the plan (default: 1)
        default_payment_method: Payment method charged for invoices
        metadata: Key-value pairs to attach to the subscription
    """

    customer_id: str
    plan_id: str
    quantity: int = 1
    default_payment_method: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.customer_id:
            raise ValueError("customer_id is required")
        if not self.plan_id:
            raise ValueError("plan_id is required")
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")

    def items(self) -> list[dict[str, Any]]:
        """Subscription items for a single plan billed ``quantity`` times."""
        return [{"price": self.plan_id, "quantity": self.quantity}]

    def to_stripe_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "customer": self.customer_id,
            "items": self.items(),
            "metadata": self.metadata,
        }
        if self.default_payment_method:
            kwargs["default_payment_method"] = self.default_payment_method
        return kwargs


@dataclass
class UpdateSubscriptionParams:
    """
    Parameters for updating an existing Stripe Subscription.

    Only fields that are set are sent to Stripe.

    Attributes:
        coupon: Coupon code to apply as a subscription discount
        cancel_at: Absolute, timezone-aware cancellation time
        cancel_at_period_end: Whether to cancel when the current period ends
    """

    coupon: str | None = None
    cancel_at: datetime | None = None
    cancel_at_period_end: bool | None = None

    def __post_init__(self) -> None:
        if self.coupon is not None and not self.coupon:
            raise ValueError("coupon must not be empty")
        if self.cancel_at is not None and self.cancel_at.tzinfo is None:
            raise ValueError("cancel_at must be timezone-aware")
        if (
            self.coupon is None
            and self.cancel_at is None
            and self.cancel_at_period_end is None
        ):
            raise ValueError("at least one field must be set")

    def to_stripe_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.coupon is not None:
            kwargs["discounts"] = [{"coupon": self.coupon}]
        if self.cancel_at_period_end is not None:
            kwargs["cancel_at_period_end"] = self.cancel_at_period_end
        if self.cancel_at is not None:
            kwargs["cancel_at"] = int(self.cancel_at.timestamp())
        return kwargs


# =============================================================================
# Results
# =============================================================================


@dataclass
class CustomerResult:
    """
    Result from Stripe Customer operations.

    Attributes:
        id: Customer ID (cus_xxx)
        email: Customer email, if set
        name: Customer name, if set
        default_payment_method: Invoice default payment method (pm_xxx)
        metadata: Attached metadata
        raw_response: Full Stripe response dict
    """

    id: str
    email: str | None = None
    name: str | None = None
    default_payment_method: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentMethodResult:
    """
    Result from Stripe PaymentMethod operations.

    Attributes:
        id: PaymentMethod ID (pm_xxx)
        type: Payment method type (card, sepa_debit, ...)
        customer_id: Customer the method is attached to (None once detached)
        card_brand: Card brand for card payment methods
        card_last4: Last four card digits for card payment methods
        raw_response: Full Stripe response dict
    """

    id: str
    type: str
    customer_id: str | None = None
    card_brand: str | None = None
    card_last4: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class SubscriptionResult:
    """
    Result from Stripe Subscription operations.

    Attributes:
        id: Subscription ID (sub_xxx)
        status: Stripe status (active, trialing, past_due, canceled, ...)
        customer_id: Customer ID (cus_xxx)
        cancel_at_period_end: Whether cancellation is scheduled for period end
        cancel_at: Scheduled cancellation as a Unix timestamp
        raw_response: Full Stripe response dict
    """

    id: str
    status: str
    customer_id: str
    cancel_at_period_end: bool = False
    cancel_at: int | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class InvoiceResult:
    """
    Result from Stripe upcoming invoice lookups.

    Attributes:
        id: Invoice ID (preview invoices may have no stable ID)
        customer_id: Customer ID (cus_xxx)
        amount_due: Amount due in the smallest currency unit
        currency: ISO 4217 currency code
        status: Invoice status
        period_start: Billing period start (Unix timestamp)
        period_end: Billing period end (Unix timestamp)
        next_payment_attempt: When Stripe will try to collect (Unix timestamp)
        raw_response: Full Stripe response dict
    """

    id: str | None
    customer_id: str
    amount_due: int
    currency: str
    status: str | None = None
    period_start: int | None = None
    period_end: int | None = None
    next_payment_attempt: int | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


def _object_id(value: Any) -> str | None:
    """Return the ID of a possibly-expanded Stripe reference."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("id")
    return value.to_dict().get("id")


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    All methods are class methods; no instance state is kept. Every method
    either returns a result dataclass or raises a StripeError subclass.

    Usage:
        customer = StripeAdapter.create_customer(CreateCustomerParams(user_id="42"))
        subscription = StripeAdapter.retrieve_subscription("sub_xxx")
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @staticmethod
    def _configure_stripe() -> None:
        """Configure the Stripe client from settings."""
        stripe.api_key = settings.STRIPE_SECRET_KEY
        timeout = getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)
        stripe.max_network_retries = 0
        api_version = getattr(settings, "STRIPE_API_VERSION", None)
        if api_version:
            stripe.api_version = api_version

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def _execute(
        cls,
        call: Callable[[], Any],
        log_context: dict[str, Any],
        level: int = logging.INFO,
    ) -> Any:
        """
        Run a single Stripe SDK call with logging and error translation.

        Args:
            call: Zero-argument callable performing the SDK request
            log_context: Logging context (must include "operation")
            level: Log level for the start/complete messages

        Returns:
            The Stripe object returned by the SDK
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        start_time = time.time()
        logger.log(level, "Starting Stripe operation", extra=log_context)

        try:
            response = call()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)

        duration_ms = (time.time() - start_time) * 1000
        logger.log(
            level,
            "Stripe operation completed",
            extra={**log_context, "duration_ms": duration_ms},
        )
        return response

    # =========================================================================
    # Customers
    # =========================================================================

    @classmethod
    def create_customer(cls, params: CreateCustomerParams) -> CustomerResult:
        """
        Create a Stripe Customer for a host user.

        Raises:
            StripeInvalidRequestError: Invalid parameters
            StripeAPIUnavailableError: Stripe service unavailable
        """
        customer = cls._execute(
            lambda: stripe.Customer.create(**params.to_stripe_kwargs()),
            {"operation": "create_customer", "user_id": params.user_id},
        )
        return cls._to_customer_result(customer)

    @classmethod
    def retrieve_customer(cls, customer_id: str) -> CustomerResult:
        """
        Retrieve a Stripe Customer by ID.

        Raises:
            StripeInvalidRequestError: Customer not found or deleted
        """
        customer = cls._execute(
            lambda: stripe.Customer.retrieve(customer_id),
            {"operation": "retrieve_customer", "customer_id": customer_id},
            level=logging.DEBUG,
        )

        # Deleted customers come back as {"id": ..., "deleted": true}
        if customer.to_dict().get("deleted"):
            cls.get_logger().warning(
                "Stripe customer has been deleted",
                extra={"customer_id": customer_id},
            )
            raise StripeInvalidRequestError(
                f"Customer {customer_id} has been deleted",
                stripe_code=CUSTOMER_DELETED,
                details={"customer_id": customer_id},
            )

        return cls._to_customer_result(customer)

    # =========================================================================
    # Payment Methods
    # =========================================================================

    @classmethod
    def create_payment_method_from_token(cls, token: str) -> PaymentMethodResult:
        """
        Exchange a card token (tok_xxx) for a reusable PaymentMethod.

        Raises:
            StripeCardDeclinedError: Card rejected
            StripeInvalidRequestError: Unknown or already used token
        """
        payment_method = cls._execute(
            lambda: stripe.PaymentMethod.create(type="card", card={"token": token}),
            {"operation": "create_payment_method_from_token"},
        )
        return cls._to_payment_method_result(payment_method)

    @classmethod
    def attach_payment_method(
        cls,
        payment_method_id: str,
        customer_id: str,
    ) -> PaymentMethodResult:
        """
        Attach a PaymentMethod to a Customer.

        Raises:
            StripeCardDeclinedError: Card rejected during verification
            StripeInvalidRequestError: Unknown payment method or customer
        """
        payment_method = cls._execute(
            lambda: stripe.PaymentMethod.attach(
                payment_method_id,
                customer=customer_id,
            ),
            {
                "operation": "attach_payment_method",
                "payment_method_id": payment_method_id,
                "customer_id": customer_id,
            },
        )
        return cls._to_payment_method_result(payment_method)

    @classmethod
    def detach_payment_method(cls, payment_method_id: str) -> PaymentMethodResult:
        """
        Detach a PaymentMethod from its Customer.

        Raises:
            StripeInvalidRequestError: Unknown or unattached payment method
        """
        payment_method = cls._execute(
            lambda: stripe.PaymentMethod.detach(payment_method_id),
            {
                "operation": "detach_payment_method",
                "payment_method_id": payment_method_id,
            },
        )
        return cls._to_payment_method_result(payment_method)

    @classmethod
    def set_default_payment_method(
        cls,
        customer_id: str,
        payment_method_id: str,
    ) -> CustomerResult:
        """
        Make a PaymentMethod the Customer's default for invoices.

        Raises:
            StripeInvalidRequestError: Payment method not attached to customer
        """
        customer = cls._execute(
            lambda: stripe.Customer.modify(
                customer_id,
                invoice_settings={"default_payment_method": payment_method_id},
            ),
            {
                "operation": "set_default_payment_method",
                "customer_id": customer_id,
                "payment_method_id": payment_method_id,
            },
        )
        return cls._to_customer_result(customer)

    # =========================================================================
    # Subscriptions
    # =========================================================================

    @classmethod
    def create_subscription(
        cls,
        params: CreateSubscriptionParams,
    ) -> SubscriptionResult:
        """
        Create a Stripe Subscription.

        Raises:
            StripeCardDeclinedError: First invoice payment declined
            StripeInvalidRequestError: Unknown customer, plan or payment method
            StripeAPIUnavailableError: Stripe service unavailable
        """
        subscription = cls._execute(
            lambda: stripe.Subscription.create(**params.to_stripe_kwargs()),
            {
                "operation": "create_subscription",
                "customer_id": params.customer_id,
                "plan_id": params.plan_id,
                "quantity": params.quantity,
            },
        )
        return cls._to_subscription_result(subscription)

    @classmethod
    def retrieve_subscription(cls, subscription_id: str) -> SubscriptionResult:
        """
        Retrieve a Stripe Subscription by ID.

        Raises:
            StripeInvalidRequestError: Subscription not found
        """
        subscription = cls._execute(
            lambda: stripe.Subscription.retrieve(subscription_id),
            {"operation": "retrieve_subscription", "subscription_id": subscription_id},
            level=logging.DEBUG,
        )
        return cls._to_subscription_result(subscription)

    @classmethod
    def update_subscription(
        cls,
        subscription_id: str,
        params: UpdateSubscriptionParams,
    ) -> SubscriptionResult:
        """
        Update a Stripe Subscription.

        Raises:
            StripeInvalidRequestError: Unknown subscription or coupon
            StripeAPIUnavailableError: Stripe service unavailable
        """
        kwargs = params.to_stripe_kwargs()
        subscription = cls._execute(
            lambda: stripe.Subscription.modify(subscription_id, **kwargs),
            {
                "operation": "update_subscription",
                "subscription_id": subscription_id,
                "fields": sorted(kwargs),
            },
        )
        return cls._to_subscription_result(subscription)

    # =========================================================================
    # Invoices
    # =========================================================================

    @classmethod
    def retrieve_upcoming_invoice(cls, customer_id: str) -> InvoiceResult | None:
        """
        Preview the next invoice Stripe will issue for a Customer.

        Returns:
            InvoiceResult, or None when the customer has no upcoming invoice

        Raises:
            StripeInvalidRequestError: Unknown customer
        """
        try:
            invoice = cls._execute(
                lambda: stripe.Invoice.create_preview(customer=customer_id),
                {"operation": "retrieve_upcoming_invoice", "customer_id": customer_id},
                level=logging.DEBUG,
            )
        except StripeInvalidRequestError as e:
            if e.stripe_code == UPCOMING_INVOICE_NONE:
                return None
            raise

        return cls._to_invoice_result(invoice)

    # =========================================================================
    # Response Mapping
    # =========================================================================
    # Stripe objects are not dicts and raise AttributeError for absent keys,
    # so every mapper reads from the recursive to_dict() copy.

    @staticmethod
    def _to_customer_result(customer: Any) -> CustomerResult:
        data = customer.to_dict()
        invoice_settings = data.get("invoice_settings") or {}
        return CustomerResult(
            id=data["id"],
            email=data.get("email"),
            name=data.get("name"),
            default_payment_method=_object_id(
                invoice_settings.get("default_payment_method")
            ),
            metadata=dict(data.get("metadata") or {}),
            raw_response=data,
        )

    @staticmethod
    def _to_payment_method_result(payment_method: Any) -> PaymentMethodResult:
        data = payment_method.to_dict()
        card = data.get("card") or {}
        return PaymentMethodResult(
            id=data["id"],
            type=data.get("type", "card"),
            customer_id=_object_id(data.get("customer")),
            card_brand=card.get("brand"),
            card_last4=card.get("last4"),
            raw_response=data,
        )

    @staticmethod
    def _to_subscription_result(subscription: Any) -> SubscriptionResult:
        data = subscription.to_dict()
        return SubscriptionResult(
            id=data["id"],
            status=data["status"],
            customer_id=_object_id(data.get("customer")),
            cancel_at_period_end=bool(data.get("cancel_at_period_end")),
            cancel_at=data.get("cancel_at"),
            raw_response=data,
        )

    @staticmethod
    def _to_invoice_result(invoice: Any) -> InvoiceResult:
        data = invoice.to_dict()
        return InvoiceResult(
            id=data.get("id"),
            customer_id=_object_id(data.get("customer")),
            amount_due=data.get("amount_due", 0),
            currency=data.get("currency", ""),
            status=data.get("status"),
            period_start=data.get("period_start"),
            period_end=data.get("period_end"),
            next_payment_attempt=data.get("next_payment_attempt"),
            raw_response=data,
        )

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> NoReturn:
        """
        Translate a Stripe SDK exception to a billing StripeError.

        The SDK exception is chained as ``__cause__``.

        Raises:
            StripeCardDeclinedError: Card was declined
            StripeInvalidRequestError: Invalid request parameters
            StripeAuthenticationError: Invalid API key
            StripeRateLimitError: Rate limited
            StripeAPIUnavailableError: Connection failure, server error, or unknown
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.CardError):
            decline_code = getattr(error, "decline_code", None)
            logger.warning(
                "Card error from Stripe",
                extra={**log_context, "decline_code": decline_code},
            )
            raise StripeCardDeclinedError(
                str(error.user_message or error),
                stripe_code=error.code,
                decline_code=decline_code,
            ) from error

        if isinstance(error, stripe.InvalidRequestError):
            # The "no upcoming invoice" answer is an expected outcome
            level = logging.INFO if error.code == UPCOMING_INVOICE_NONE else logging.ERROR
            logger.log(
                level,
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            raise StripeInvalidRequestError(
                str(error.user_message or error),
                stripe_code=error.code,
            ) from error

        if isinstance(error, stripe.AuthenticationError):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise StripeAuthenticationError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            ) from error

        if isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise StripeRateLimitError(
                "Stripe rate limit exceeded",
                stripe_code="rate_limit",
            ) from error

        if isinstance(error, stripe.APIConnectionError):
            logger.error("Connection error to Stripe", extra=log_context, exc_info=True)
            raise StripeAPIUnavailableError(
                "Could not connect to Stripe",
                stripe_code="api_connection_error",
            ) from error

        if isinstance(error, stripe.APIError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise StripeAPIUnavailableError(
                "Stripe service error",
                stripe_code="api_error",
            ) from error

        logger.error(
            f"Unexpected error from Stripe: {type(error).__name__}",
            extra=log_context,
            exc_info=True,
        )
        raise StripeAPIUnavailableError(
            f"Unexpected Stripe error: {error}",
            stripe_code="unknown_error",
        ) from error
