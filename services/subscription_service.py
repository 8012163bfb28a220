"""Stripe subscription service."""

import logging
from typing import Any

import stripe

from clients.stripe_client import PaymentClient
from core.config import Settings, settings
from core.constants import (
    CANCELABLE_STATUSES,
    PLAN_CATALOG,
    BillingInterval,
    PlanType,
)
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from schemas.subscription import CancelSubscriptionResponse, Plan
from utils.urls import CHECKOUT_SESSION_PLACEHOLDER, build_url

logger = logging.getLogger(__name__)


def list_plans(config: Settings = settings) -> list[Plan]:
    """Return the plan catalog with configured price IDs."""
    return [
        Plan(
            id=plan_type,
            price_id=config.price_id_for(plan_type.value),
            price_id_yearly=config.price_id_for(plan_type.value, yearly=True),
            **details,
        )
        for plan_type, details in PLAN_CATALOG.items()
    ]


def get_plan(plan: str | PlanType, config: Settings = settings) -> Plan:
    """
    Look up a plan by identifier.

    Raises:
        ValidationError: If the plan does not exist.
    """
    try:
        plan_type = PlanType(plan)
    except ValueError:
        raise ValidationError("Invalid plan type") from None
    return next(p for p in list_plans(config) if p.id == plan_type)


def _current_period_end(subscription: Any) -> int | None:
    # Newer API versions report the period on subscription items
    period_end = getattr(subscription, "current_period_end", None)
    if period_end is not None:
        return period_end
    try:
        items = subscription["items"]
    except (KeyError, TypeError):
        return None
    data = getattr(items, "data", None) or []
    if data:
        return getattr(data[0], "current_period_end", None)
    return None


class SubscriptionService:
    """Service for managing Stripe subscriptions."""

    def __init__(self, client: PaymentClient, config: Settings = settings) -> None:
        """Initialize subscription service."""
        self.client = client
        self.config = config

    async def get_customer(self, email: str) -> stripe.Customer | None:
        """
        Find an existing customer by exact email.

        Returns:
            The first matching customer with subscriptions expanded, or None
        """
        customers = await self.client.list_customers_by_email(email, limit=1)
        if not customers:
            return None
        return await self.client.retrieve_customer(
            customers[0].id, expand=["subscriptions"]
        )

    async def get_customer_with_subscriptions(
        self, email: str
    ) -> tuple[stripe.Customer, list[stripe.Subscription]] | None:
        """Find a customer by email along with all of their subscriptions."""
        customer = await self.get_customer(email)
        if customer is None:
            return None
        subscriptions = await self.client.list_subscriptions(customer.id)
        return customer, subscriptions

    async def get_or_create_customer(self, email: str) -> stripe.Customer:
        """Return the customer for this email, creating one if none exists."""
        customer = await self.get_customer(email)
        if customer is not None:
            logger.info(f"Using existing Stripe customer: {customer.id}")
            return customer

        customer = await self.client.create_customer(email=email)
        logger.info(f"Created new Stripe customer: {customer.id}")
        return customer

    async def create_checkout_session(
        self,
        email: str,
        plan: str | PlanType,
        interval: BillingInterval = BillingInterval.MONTHLY,
    ) -> stripe.checkout.Session:
        """
        Create a subscription checkout session for a plan.

        Args:
            email: Customer email address
            plan: Plan identifier (basic, pro, enterprise)
            interval: Monthly or yearly billing

        Returns:
            The checkout session; its url is the redirect target
        """
        selected = get_plan(plan, self.config)
        email = (email or "").strip()
        if not email:
            raise ValidationError("Please enter your email address")

        customer = await self.get_or_create_customer(email)
        price_id = (
            selected.price_id_yearly
            if interval == BillingInterval.YEARLY and selected.price_id_yearly
            else selected.price_id
        )

        session = await self.client.create_checkout_session(
            customer=customer.id,
            line_items=[{"price": price_id, "quantity": 1}],
            mode="subscription",
            success_url=build_url(
                self.config.public_url,
                "subscription/success",
                session_id=CHECKOUT_SESSION_PLACEHOLDER,
            ),
            cancel_url=build_url(
                self.config.public_url, f"subscription/{selected.id.value}"
            ),
            allow_promotion_codes=False,
            billing_address_collection="required",
            customer_update={"address": "auto", "name": "auto"},
        )
        logger.info(
            f"Checkout session {session.id} created for {customer.id} "
            f"on plan {selected.id.value} ({interval.value})"
        )
        return session

    async def _customer_from_session(self, session_id: str) -> stripe.Customer:
        if not session_id:
            raise ValidationError("No session ID found")

        session = await self.client.retrieve_checkout_session(session_id)
        details = getattr(session, "customer_details", None)
        email = getattr(details, "email", None) if details else None
        if not email:
            raise NotFoundError("Email not found in session")

        customer = await self.get_customer(email)
        if customer is None:
            raise NotFoundError("Customer not found. Please contact support.")
        return customer

    async def create_billing_portal_session(
        self, session_id: str
    ) -> stripe.billing_portal.Session:
        """Create a billing portal session for the customer behind a checkout."""
        customer = await self._customer_from_session(session_id)
        return await self.client.create_portal_session(
            customer.id,
            return_url=build_url(
                self.config.public_url,
                "subscription/success",
                session_id=session_id,
            ),
        )

    async def cancel_subscription(self, session_id: str) -> CancelSubscriptionResponse:
        """
        Cancel the customer's subscription at the end of the billing period.

        Only the first active or trialing subscription is canceled; a customer
        is assumed to hold at most one.
        """
        customer = await self._customer_from_session(session_id)
        subscriptions = await self.client.list_subscriptions(customer.id)

        cancelable = [s for s in subscriptions if s.status in CANCELABLE_STATUSES]
        if not cancelable:
            raise BusinessRuleError("No active subscription found for customer")
        if len(cancelable) > 1:
            logger.warning(
                f"Customer {customer.id} has {len(cancelable)} active subscriptions, "
                f"only {cancelable[0].id} will be canceled"
            )

        updated = await self.client.cancel_subscription_at_period_end(
            cancelable[0].id
        )
        logger.info(f"Subscription {updated.id} set to cancel at period end")

        return CancelSubscriptionResponse(
            subscription_id=updated.id,
            status=updated.status,
            cancel_at_period_end=bool(updated.cancel_at_period_end),
            current_period_end=_current_period_end(updated),
        )
