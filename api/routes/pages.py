"""Server-rendered storefront pages."""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from api.dependencies import (
    BalanceServiceDep,
    OptionalBalanceServiceDep,
    SubscriptionServiceDep,
)
from core.constants import BillingInterval
from core.exceptions import ConfigurationError, ValidationError
from schemas.common import ActionResult
from services.actions import run_action
from services.subscription_service import get_plan, list_plans

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


def _render(
    request: Request,
    name: str,
    status_code: int = status.HTTP_200_OK,
    **context: Any,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request, name, context, status_code=status_code
    )


def _follow(result: ActionResult) -> RedirectResponse | None:
    if result.ok and result.redirect_url:
        return RedirectResponse(result.redirect_url, status.HTTP_303_SEE_OTHER)
    return None


def render_error(request: Request, message: str, status_code: int) -> HTMLResponse:
    """Render an error banner for a failure raised before the page handler ran."""
    banner = ActionResult(status="error", message=message)
    if request.url.path.startswith("/subscription"):
        return _render(
            request, "plans.html", status_code, plans=list_plans(), status=banner
        )
    return _render(
        request,
        "index.html",
        status_code,
        customer_id=request.query_params.get("customer_id", ""),
        status=banner,
    )


# Balance playground


@router.get("/", response_class=HTMLResponse)
async def balance_page(
    request: Request,
    service: OptionalBalanceServiceDep,
    session_id: str | None = None,
    customer_id: str | None = None,
    canceled: bool = False,
) -> HTMLResponse:
    """
    Balance playground.

    Workflow state is rebuilt from the redirect query parameters on every load.
    """
    if session_id and service is None:
        raise ConfigurationError(
            "STRIPE_SECRET_KEY is not set in environment variables"
        )

    banner: ActionResult | None = None
    current_customer = customer_id

    if session_id:
        result, state = await run_action(
            lambda: service.recover_state(session_id, customer_id, canceled),
            "Session restored",
        )
        if state is None:
            banner = result
        else:
            current_customer = state.customer_id
            if state.setup_completed:
                banner = ActionResult(
                    status="success",
                    message="Default payment method updated successfully",
                    resource_id=state.payment_method_id,
                )

    if canceled and banner is None:
        banner = ActionResult(status="notice", message="Checkout was canceled")

    return _render(
        request, "index.html", customer_id=current_customer or "", status=banner
    )


async def _balance_action(
    request: Request,
    customer_id: str,
    result: ActionResult,
) -> Response:
    redirect = _follow(result)
    if redirect is not None:
        return redirect
    return _render(request, "index.html", customer_id=customer_id, status=result)


@router.post("/actions/customer", response_class=HTMLResponse)
async def create_customer_action(
    request: Request,
    service: BalanceServiceDep,
    name: str = Form(""),  # noqa: B008
    customer_id: str = Form(""),  # noqa: B008
) -> Response:
    """Create a playground customer."""
    result, customer = await run_action(
        lambda: service.create_customer(name), "Customer created successfully"
    )
    if customer is not None:
        customer_id = customer.id
    return await _balance_action(request, customer_id, result)


@router.post("/actions/setup")
async def setup_action(
    request: Request,
    service: BalanceServiceDep,
    customer_id: str = Form(""),  # noqa: B008
) -> Response:
    """Send the browser to the hosted setup page."""
    result, _ = await run_action(
        lambda: service.initiate_setup(customer_id),
        "Setup session created successfully",
        redirect=True,
    )
    return await _balance_action(request, customer_id, result)


@router.post("/actions/setup-intent", response_class=HTMLResponse)
async def setup_intent_action(
    request: Request,
    service: BalanceServiceDep,
    customer_id: str = Form(""),  # noqa: B008
) -> Response:
    """Create a setup intent for embedded confirmation."""
    result, _ = await run_action(
        lambda: service.initiate_setup_intent(customer_id),
        "SetupIntent created successfully",
    )
    return await _balance_action(request, customer_id, result)


@router.post("/actions/portal")
async def portal_action(
    request: Request,
    service: BalanceServiceDep,
    customer_id: str = Form(""),  # noqa: B008
) -> Response:
    """Send the browser to the billing portal."""
    result, _ = await run_action(
        lambda: service.create_portal_session(customer_id),
        "Setup session updated successfully",
        redirect=True,
    )
    return await _balance_action(request, customer_id, result)


@router.post("/actions/credit", response_class=HTMLResponse)
async def credit_action(
    request: Request,
    service: BalanceServiceDep,
    customer_id: str = Form(""),  # noqa: B008
    amount: str = Form(""),  # noqa: B008
) -> Response:
    """Charge the default payment method and credit the balance."""
    result, _ = await run_action(
        lambda: service.charge_and_credit(customer_id, amount),
        f"Successfully funded customer balance with ${amount}",
    )
    return await _balance_action(request, customer_id, result)


@router.post("/actions/debit", response_class=HTMLResponse)
async def debit_action(
    request: Request,
    service: BalanceServiceDep,
    customer_id: str = Form(""),  # noqa: B008
    amount: str = Form(""),  # noqa: B008
) -> Response:
    """Debit the customer's credit balance."""
    result, _ = await run_action(
        lambda: service.debit(customer_id, amount),
        f"Successfully debited customer balance with ${amount}",
    )
    return await _balance_action(request, customer_id, result)


@router.post("/actions/checkout-credit")
async def checkout_credit_action(
    request: Request,
    service: BalanceServiceDep,
    customer_id: str = Form(""),  # noqa: B008
    amount: str = Form(""),  # noqa: B008
) -> Response:
    """Send the browser to a one-time checkout for balance credit."""
    result, _ = await run_action(
        lambda: service.initiate_checkout_credit(customer_id, amount),
        "Redirecting to Stripe Checkout",
        redirect=True,
    )
    return await _balance_action(request, customer_id, result)


# Subscriptions


@router.get("/subscription", response_class=HTMLResponse)
async def plans_page(request: Request) -> HTMLResponse:
    """List the subscription plans."""
    return _render(request, "plans.html", plans=list_plans())


@router.get("/subscription/success", response_class=HTMLResponse)
async def success_page(
    request: Request, session_id: str | None = None
) -> HTMLResponse:
    """Landing page after a completed subscription checkout."""
    banner = None
    if not session_id:
        banner = ActionResult(status="error", message="No session ID found")
    return _render(
        request, "success.html", session_id=session_id or "", status=banner
    )


@router.post("/subscription/success/portal")
async def success_portal_action(
    request: Request,
    service: SubscriptionServiceDep,
    session_id: str = Form(""),  # noqa: B008
) -> Response:
    """Send the subscriber to the billing portal."""
    result, _ = await run_action(
        lambda: service.create_billing_portal_session(session_id),
        "Redirecting to billing portal",
        redirect=True,
    )
    redirect = _follow(result)
    if redirect is not None:
        return redirect
    return _render(request, "success.html", session_id=session_id, status=result)


@router.post("/subscription/success/cancel", response_class=HTMLResponse)
async def success_cancel_action(
    request: Request,
    service: SubscriptionServiceDep,
    session_id: str = Form(""),  # noqa: B008
) -> HTMLResponse:
    """Cancel the subscription at the end of the billing period."""
    result, canceled = await run_action(
        lambda: service.cancel_subscription(session_id),
        "Subscription will be canceled at the end of the billing period",
    )
    return _render(
        request,
        "success.html",
        session_id=session_id,
        status=result,
        subscription=canceled,
    )


def _plan_or_none(plan: str) -> Any:
    try:
        return get_plan(plan)
    except ValidationError:
        return None


@router.get("/subscription/{plan}", response_class=HTMLResponse)
async def plan_page(request: Request, plan: str) -> HTMLResponse:
    """Checkout page for a single plan."""
    selected = _plan_or_none(plan)
    if selected is None:
        return _render(
            request, "plan.html", status_code=status.HTTP_404_NOT_FOUND, plan=None
        )
    return _render(request, "plan.html", plan=selected, email="")


@router.post("/subscription/{plan}")
async def plan_checkout_action(
    request: Request,
    plan: str,
    service: SubscriptionServiceDep,
    email: str = Form(""),  # noqa: B008
    interval: BillingInterval = Form(BillingInterval.MONTHLY),  # noqa: B008
) -> Response:
    """Start a subscription checkout for the plan."""
    selected = _plan_or_none(plan)
    if selected is None:
        return _render(
            request, "plan.html", status_code=status.HTTP_404_NOT_FOUND, plan=None
        )

    result, _ = await run_action(
        lambda: service.create_checkout_session(email, selected.id, interval),
        "Redirecting to Stripe Checkout",
        redirect=True,
    )
    redirect = _follow(result)
    if redirect is not None:
        return redirect
    return _render(request, "plan.html", plan=selected, email=email, status=result)
