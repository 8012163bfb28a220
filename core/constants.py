"""Application constants and enumerations."""

from enum import Enum
from typing import Any


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PlanType(str, Enum):
    """Subscription plan identifiers."""

    BASIC = "basic"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class BillingInterval(str, Enum):
    """Billing interval for a subscription checkout."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(str, Enum):
    """Stripe subscription statuses the storefront cares about."""

    ACTIVE = "active"
    TRIALING = "trialing"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"
    PAUSED = "paused"


# Subscriptions that can still be canceled at period end
CANCELABLE_STATUSES = frozenset(
    {SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value}
)

# PaymentIntent status reported for a completed charge
PAYMENT_SUCCEEDED = "succeeded"

PAYMENT_METHOD_TYPES = ["card"]

CREDIT_PRODUCT_NAME = "Credit Balance"
CREDIT_DESCRIPTION = "Funding customer balance from default payment method"
DEBIT_DESCRIPTION = "Debiting customer balance"

# Display catalog for the plan pages; price IDs come from settings
PLAN_CATALOG: dict[PlanType, dict[str, Any]] = {
    PlanType.BASIC: {
        "name": "Basic",
        "price": "$29",
        "description": "Perfect for getting started with your projects",
        "highlight": "Great for individuals and small projects",
        "features": [
            "Up to 5 projects",
            "Basic support via email",
            "10GB storage",
            "Standard features",
            "Monthly reports",
            "Basic analytics",
        ],
        "popular": False,
    },
    PlanType.PRO: {
        "name": "Pro",
        "price": "$49",
        "description": "Best for growing businesses and teams",
        "highlight": "Most popular choice for growing businesses",
        "features": [
            "Unlimited projects",
            "Priority support",
            "100GB storage",
            "Advanced features",
            "Analytics dashboard",
            "Team collaboration",
            "Custom integrations",
            "Weekly reports",
        ],
        "popular": True,
    },
    PlanType.ENTERPRISE: {
        "name": "Enterprise",
        "price": "$99",
        "description": "For large organizations with advanced needs",
        "highlight": "Enterprise-grade security and support",
        "features": [
            "Everything in Pro",
            "Dedicated support manager",
            "Unlimited storage",
            "Custom integrations",
            "Advanced security & compliance",
            "SLA guarantee",
            "Custom onboarding",
            "Daily reports",
            "API access",
            "White-label options",
        ],
        "popular": False,
    },
}
