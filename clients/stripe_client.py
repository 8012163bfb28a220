"""Stripe API client module."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import stripe

from core.constants import PAYMENT_METHOD_TYPES
from core.exceptions import ConfigurationError, PaymentProviderError

logger = logging.getLogger(__name__)


def expandable_id(value: Any) -> str | None:
    """Return the ID of a Stripe field that is either an ID or an expanded object."""
    if not value:
        return None
    if isinstance(value, str):
        return value
    return getattr(value, "id", None)


@contextmanager
def provider_errors(fallback: str) -> Iterator[None]:
    """
    Translate Stripe errors raised inside the block into PaymentProviderError.

    The provider's own user-facing message is kept when it has one, otherwise
    the per-operation fallback message is used.
    """
    try:
        yield
    except stripe.StripeError as e:
        message = e.user_message or fallback
        logger.warning(f"Stripe call failed: {fallback} ({e.code or 'no code'}): {e}")
        raise PaymentProviderError(
            message, status_code=e.http_status, code=e.code
        ) from e


class PaymentClient:
    """Client for the Stripe resources used by the storefront."""

    def __init__(
        self,
        api_key: str,
        api_version: str | None = None,
        currency: str = "usd",
        stripe_client: stripe.StripeClient | None = None,
    ) -> None:
        """
        Initialize the Stripe client.

        Raises:
            ConfigurationError: If no API key is given.
        """
        if not api_key:
            raise ConfigurationError(
                "STRIPE_SECRET_KEY is not set in environment variables"
            )
        self.currency = currency
        self._stripe = stripe_client or stripe.StripeClient(
            api_key, stripe_version=api_version
        )

    @property
    def _v1(self) -> Any:
        return self._stripe.v1

    # Customers

    async def create_customer(
        self, email: str, name: str | None = None
    ) -> stripe.Customer:
        params: dict[str, Any] = {"email": email}
        if name:
            params["name"] = name
        with provider_errors("Failed to create customer"):
            return await self._v1.customers.create_async(params=params)

    async def retrieve_customer(
        self, customer_id: str, expand: list[str] | None = None
    ) -> stripe.Customer:
        params = {"expand": expand} if expand else None
        with provider_errors("Failed to retrieve customer"):
            return await self._v1.customers.retrieve_async(customer_id, params=params)

    async def list_customers_by_email(
        self, email: str, limit: int = 1
    ) -> list[stripe.Customer]:
        with provider_errors("Failed to look up customer"):
            result = await self._v1.customers.list_async(
                params={"email": email, "limit": limit}
            )
        return list(result.data)

    async def set_default_payment_method(
        self, customer_id: str, payment_method_id: str
    ) -> stripe.Customer:
        with provider_errors("Failed to update default payment method"):
            return await self._v1.customers.update_async(
                customer_id,
                params={
                    "invoice_settings": {"default_payment_method": payment_method_id}
                },
            )

    async def create_balance_transaction(
        self, customer_id: str, amount: int, description: str
    ) -> stripe.CustomerBalanceTransaction:
        """Post a signed ledger entry; negative amounts credit the customer."""
        with provider_errors("Failed to create balance transaction"):
            return await self._v1.customers.balance_transactions.create_async(
                customer_id,
                params={
                    "amount": amount,
                    "currency": self.currency,
                    "description": description,
                },
            )

    # Checkout and billing portal

    async def create_checkout_session(self, **params: Any) -> stripe.checkout.Session:
        params.setdefault("payment_method_types", PAYMENT_METHOD_TYPES)
        with provider_errors("Failed to create checkout session"):
            return await self._v1.checkout.sessions.create_async(params=params)

    async def retrieve_checkout_session(
        self, session_id: str
    ) -> stripe.checkout.Session:
        with provider_errors("Failed to retrieve session"):
            return await self._v1.checkout.sessions.retrieve_async(session_id)

    async def create_portal_session(
        self, customer_id: str, return_url: str
    ) -> stripe.billing_portal.Session:
        with provider_errors("Failed to create customer portal session"):
            return await self._v1.billing_portal.sessions.create_async(
                params={"customer": customer_id, "return_url": return_url}
            )

    # Setup and payment intents

    async def create_setup_intent(self, customer_id: str) -> stripe.SetupIntent:
        with provider_errors("Failed to create setup intent"):
            return await self._v1.setup_intents.create_async(
                params={
                    "customer": customer_id,
                    "payment_method_types": PAYMENT_METHOD_TYPES,
                }
            )

    async def retrieve_setup_intent(self, setup_intent_id: str) -> stripe.SetupIntent:
        with provider_errors("Failed to retrieve setup intent"):
            return await self._v1.setup_intents.retrieve_async(setup_intent_id)

    async def create_off_session_payment(
        self, customer_id: str, payment_method_id: str, amount: int
    ) -> stripe.PaymentIntent:
        """Charge a stored payment method without the customer present."""
        with provider_errors("Failed to charge customer"):
            return await self._v1.payment_intents.create_async(
                params={
                    "amount": amount,
                    "currency": self.currency,
                    "customer": customer_id,
                    "payment_method_types": PAYMENT_METHOD_TYPES,
                    "payment_method": payment_method_id,
                    "confirm": True,
                    "off_session": True,
                }
            )

    # Subscriptions

    async def list_subscriptions(self, customer_id: str) -> list[stripe.Subscription]:
        with provider_errors("Failed to list subscriptions"):
            result = await self._v1.subscriptions.list_async(
                params={"customer": customer_id, "status": "all"}
            )
        return list(result.data)

    async def cancel_subscription_at_period_end(
        self, subscription_id: str
    ) -> stripe.Subscription:
        with provider_errors("Failed to cancel subscription"):
            return await self._v1.subscriptions.update_async(
                subscription_id, params={"cancel_at_period_end": True}
            )
