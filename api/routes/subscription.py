"""Subscription management routes."""

from fastapi import APIRouter

from api.dependencies import SubscriptionServiceDep
from schemas.common import HostedPageResponse
from schemas.subscription import (
    CancelSubscriptionResponse,
    CheckoutSessionRequest,
    Plan,
    SessionRequest,
)
from services.subscription_service import list_plans

router = APIRouter()


@router.get("/plans", response_model=list[Plan])
async def get_plans() -> list[Plan]:
    """List the available subscription plans."""
    return list_plans()


@router.post("/create-checkout-session", response_model=HostedPageResponse)
async def create_checkout_session(
    checkout_request: CheckoutSessionRequest,
    service: SubscriptionServiceDep,
) -> HostedPageResponse:
    """
    Create a Stripe checkout session for a subscription plan.

    The customer is looked up by email, or created if none exists. Redirect
    the user to the returned URL to complete payment.
    """
    session = await service.create_checkout_session(
        email=checkout_request.email,
        plan=checkout_request.plan,
        interval=checkout_request.interval,
    )
    return HostedPageResponse(id=session.id, url=session.url or "")


@router.post("/portal", response_model=HostedPageResponse)
async def create_billing_portal_session(
    session_request: SessionRequest,
    service: SubscriptionServiceDep,
) -> HostedPageResponse:
    """Create a billing portal session for the customer behind a checkout."""
    portal_session = await service.create_billing_portal_session(
        session_request.session_id
    )
    return HostedPageResponse(id=portal_session.id, url=portal_session.url)


@router.post("/cancel", response_model=CancelSubscriptionResponse)
async def cancel_subscription(
    session_request: SessionRequest,
    service: SubscriptionServiceDep,
) -> CancelSubscriptionResponse:
    """
    Cancel the customer's active subscription.

    The subscription will be canceled at the end of the current billing period,
    so the customer retains access until then.
    """
    return await service.cancel_subscription(session_request.session_id)
