"""FastAPI dependencies wiring the payment client into services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from clients.stripe_client import PaymentClient
from core.config import settings
from core.exceptions import ConfigurationError
from services.balance_service import BalanceService
from services.subscription_service import SubscriptionService


@lru_cache
def get_payment_client() -> PaymentClient:
    """Build the Stripe client once from settings."""
    return PaymentClient(
        api_key=settings.stripe_secret_key,
        api_version=settings.stripe_api_version,
        currency=settings.currency,
    )


def get_payment_client_or_none() -> PaymentClient | None:
    """Shared client, or None when Stripe is not configured."""
    try:
        return get_payment_client()
    except ConfigurationError:
        return None


def get_balance_service(
    client: PaymentClient = Depends(get_payment_client),  # noqa: B008
) -> BalanceService:
    """Balance service bound to the shared client."""
    return BalanceService(client)


def get_optional_balance_service(
    client: PaymentClient | None = Depends(get_payment_client_or_none),  # noqa: B008
) -> BalanceService | None:
    """Balance service for pages that only call Stripe on some requests."""
    if client is None:
        return None
    return BalanceService(client)


def get_subscription_service(
    client: PaymentClient = Depends(get_payment_client),  # noqa: B008
) -> SubscriptionService:
    """Subscription service bound to the shared client."""
    return SubscriptionService(client)


BalanceServiceDep = Annotated[BalanceService, Depends(get_balance_service)]
SubscriptionServiceDep = Annotated[
    SubscriptionService, Depends(get_subscription_service)
]
OptionalBalanceServiceDep = Annotated[
    BalanceService | None, Depends(get_optional_balance_service)
]
