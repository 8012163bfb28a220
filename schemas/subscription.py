"""Subscription schemas for Stripe integration."""

from pydantic import BaseModel, Field

from core.constants import BillingInterval, PlanType


class CheckoutSessionRequest(BaseModel):
    """Request to create a subscription checkout session."""

    email: str = Field(default="", description="Customer email address")
    plan: PlanType = Field(..., description="Plan to subscribe to")
    interval: BillingInterval = Field(
        default=BillingInterval.MONTHLY, description="Billing interval"
    )


class SessionRequest(BaseModel):
    """Request referencing a completed checkout session."""

    session_id: str = Field(..., description="Stripe checkout session ID")


class CancelSubscriptionResponse(BaseModel):
    """Response after canceling subscription."""

    subscription_id: str = Field(..., description="Stripe subscription ID")
    status: str = Field(..., description="Stripe subscription status")
    cancel_at_period_end: bool = Field(
        ..., description="Whether the subscription ends at period end"
    )
    current_period_end: int | None = Field(
        default=None, description="Unix timestamp the current period ends"
    )


class Plan(BaseModel):
    """Plan shown on the subscription pages."""

    id: PlanType = Field(..., description="Plan identifier")
    name: str = Field(..., description="Display name")
    price: str = Field(..., description="Display price")
    description: str = Field(..., description="Short description")
    highlight: str = Field(default="", description="Tagline")
    features: list[str] = Field(default_factory=list, description="Feature list")
    popular: bool = Field(default=False, description="Highlighted plan")
    price_id: str = Field(..., description="Monthly Stripe price ID")
    price_id_yearly: str | None = Field(
        default=None, description="Yearly Stripe price ID"
    )
