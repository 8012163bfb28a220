"""Schemas package for request/response validation."""

from .balance import (
    AmountRequest,
    BalanceTransactionResponse,
    CreateCustomerRequest,
    CustomerRequest,
    CustomerResponse,
    RecoveredState,
    SetupCompletionResponse,
    SetupIntentResponse,
)
from .common import (
    ActionResult,
    ErrorResponse,
    HealthResponse,
    HostedPageResponse,
)
from .subscription import (
    CancelSubscriptionResponse,
    CheckoutSessionRequest,
    Plan,
    SessionRequest,
)

__all__ = [
    "ActionResult",
    "AmountRequest",
    "BalanceTransactionResponse",
    "CancelSubscriptionResponse",
    "CheckoutSessionRequest",
    "CreateCustomerRequest",
    "CustomerRequest",
    "CustomerResponse",
    "ErrorResponse",
    "HealthResponse",
    "Plan",
    "RecoveredState",
    "HostedPageResponse",
    "SessionRequest",
    "SetupCompletionResponse",
    "SetupIntentResponse",
]
