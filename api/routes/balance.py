"""Customer balance API routes."""

import stripe
from fastapi import APIRouter

from api.dependencies import BalanceServiceDep
from schemas.balance import (
    AmountRequest,
    BalanceTransactionResponse,
    CreateCustomerRequest,
    CustomerRequest,
    CustomerResponse,
    SetupCompletionResponse,
    SetupIntentResponse,
)
from schemas.common import HostedPageResponse
from schemas.subscription import SessionRequest

router = APIRouter()


def _transaction_response(
    transaction: stripe.CustomerBalanceTransaction,
) -> BalanceTransactionResponse:
    return BalanceTransactionResponse(
        id=transaction.id,
        amount=transaction.amount,
        currency=transaction.currency,
        description=getattr(transaction, "description", None),
    )


@router.post("/customers", response_model=CustomerResponse)
async def create_customer(
    request_data: CreateCustomerRequest, service: BalanceServiceDep
) -> CustomerResponse:
    """Create a playground customer."""
    customer = await service.create_customer(request_data.name)
    return CustomerResponse(
        id=customer.id,
        email=getattr(customer, "email", None),
        name=getattr(customer, "name", None),
    )


@router.post("/setup", response_model=HostedPageResponse)
async def initiate_setup(
    request_data: CustomerRequest, service: BalanceServiceDep
) -> HostedPageResponse:
    """
    Start a hosted setup session.

    Redirect the browser to the returned URL to collect a payment method.
    """
    session = await service.initiate_setup(request_data.customer_id)
    return HostedPageResponse(id=session.id, url=session.url or "")


@router.post("/setup/complete", response_model=SetupCompletionResponse)
async def complete_setup(
    request_data: SessionRequest, service: BalanceServiceDep
) -> SetupCompletionResponse:
    """Make the payment method collected by a setup session the default."""
    payment_method_id = await service.complete_setup(request_data.session_id)
    return SetupCompletionResponse(
        session_id=request_data.session_id,
        payment_method_id=payment_method_id,
        setup_completed=payment_method_id is not None,
    )


@router.post("/setup-intent", response_model=SetupIntentResponse)
async def initiate_setup_intent(
    request_data: CustomerRequest, service: BalanceServiceDep
) -> SetupIntentResponse:
    """Create a setup intent for confirmation with Stripe.js."""
    setup_intent = await service.initiate_setup_intent(request_data.customer_id)
    return SetupIntentResponse(
        id=setup_intent.id, client_secret=setup_intent.client_secret
    )


@router.post("/portal", response_model=HostedPageResponse)
async def create_portal_session(
    request_data: CustomerRequest, service: BalanceServiceDep
) -> HostedPageResponse:
    """Create a billing portal session for managing payment methods."""
    portal_session = await service.create_portal_session(request_data.customer_id)
    return HostedPageResponse(id=portal_session.id, url=portal_session.url)


@router.post("/credit", response_model=BalanceTransactionResponse)
async def charge_and_credit(
    request_data: AmountRequest, service: BalanceServiceDep
) -> BalanceTransactionResponse:
    """Charge the default payment method and credit the balance."""
    transaction = await service.charge_and_credit(
        request_data.customer_id, request_data.amount
    )
    return _transaction_response(transaction)


@router.post("/debit", response_model=BalanceTransactionResponse)
async def debit(
    request_data: AmountRequest, service: BalanceServiceDep
) -> BalanceTransactionResponse:
    """Debit the customer's credit balance."""
    transaction = await service.debit(request_data.customer_id, request_data.amount)
    return _transaction_response(transaction)


@router.post("/checkout-credit", response_model=HostedPageResponse)
async def initiate_checkout_credit(
    request_data: AmountRequest, service: BalanceServiceDep
) -> HostedPageResponse:
    """Create a one-time checkout session that pays for balance credit."""
    session = await service.initiate_checkout_credit(
        request_data.customer_id, request_data.amount
    )
    return HostedPageResponse(id=session.id, url=session.url or "")
