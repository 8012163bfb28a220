"""Services package for business logic."""

from .actions import run_action
from .balance_service import BalanceService
from .subscription_service import SubscriptionService, get_plan, list_plans

__all__ = [
    "BalanceService",
    "SubscriptionService",
    "get_plan",
    "list_plans",
    "run_action",
]
