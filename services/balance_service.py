"""Customer balance and payment method setup service."""

import logging
from decimal import Decimal

import stripe

from clients.stripe_client import PaymentClient, expandable_id
from core.config import Settings, settings
from core.constants import (
    CREDIT_DESCRIPTION,
    CREDIT_PRODUCT_NAME,
    DEBIT_DESCRIPTION,
    PAYMENT_SUCCEEDED,
)
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from schemas.balance import RecoveredState
from utils.money import dollars_to_cents
from utils.urls import CHECKOUT_SESSION_PLACEHOLDER, build_url

logger = logging.getLogger(__name__)


def _require_customer_id(customer_id: str | None) -> str:
    if not customer_id:
        raise ValidationError("Customer ID is required")
    return customer_id


class BalanceService:
    """Service for the customer balance playground."""

    def __init__(self, client: PaymentClient, config: Settings = settings) -> None:
        """Initialize balance service."""
        self.client = client
        self.config = config

    def _success_url(self) -> str:
        return build_url(
            self.config.public_url, session_id=CHECKOUT_SESSION_PLACEHOLDER
        )

    def _cancel_url(self, customer_id: str) -> str:
        return build_url(
            self.config.public_url, canceled=True, customer_id=customer_id
        )

    async def create_customer(self, name: str) -> stripe.Customer:
        """Create a playground customer with a generated email address."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Customer name is required")

        email = f"{name}@{self.config.demo_email_domain}"
        customer = await self.client.create_customer(email=email, name=name)
        logger.info(f"Created customer {customer.id} for {email}")
        return customer

    async def initiate_setup(self, customer_id: str) -> stripe.checkout.Session:
        """Create a hosted setup session for collecting a payment method."""
        customer_id = _require_customer_id(customer_id)
        return await self.client.create_checkout_session(
            mode="setup",
            customer=customer_id,
            success_url=self._success_url(),
            cancel_url=self._cancel_url(customer_id),
        )

    async def initiate_setup_intent(self, customer_id: str) -> stripe.SetupIntent:
        """Create a setup intent for client-side confirmation."""
        customer_id = _require_customer_id(customer_id)
        setup_intent = await self.client.create_setup_intent(customer_id)
        logger.info(f"Created setup intent {setup_intent.id} for {customer_id}")
        return setup_intent

    async def create_portal_session(
        self, customer_id: str
    ) -> stripe.billing_portal.Session:
        """Create a billing portal session for managing payment methods."""
        customer_id = _require_customer_id(customer_id)
        return await self.client.create_portal_session(
            customer_id,
            return_url=build_url(self.config.public_url, customer_id=customer_id),
        )

    async def complete_setup(self, session_id: str) -> str | None:
        """
        Finish a hosted setup session.

        Resolves session -> setup intent -> payment method, then makes that
        payment method the customer's default so it can be charged off-session.

        Returns:
            The payment method ID set as default, or None if the session
            carried no completed setup.
        """
        session = await self.client.retrieve_checkout_session(session_id)
        return await self._apply_setup(session)

    async def _apply_setup(self, session: stripe.checkout.Session) -> str | None:
        customer_id = expandable_id(session.customer)
        setup_intent_id = expandable_id(getattr(session, "setup_intent", None))
        if not customer_id or not setup_intent_id:
            logger.info(f"Session {session.id} has no setup to complete")
            return None

        setup_intent = await self.client.retrieve_setup_intent(setup_intent_id)
        payment_method_id = expandable_id(setup_intent.payment_method)
        if not payment_method_id:
            logger.info(f"Setup intent {setup_intent_id} has no payment method yet")
            return None

        await self.client.set_default_payment_method(customer_id, payment_method_id)
        logger.info(
            f"Default payment method for {customer_id} set to {payment_method_id}"
        )
        return payment_method_id

    async def get_default_payment_method_id(self, customer_id: str) -> str:
        """
        Return the customer's default payment method ID.

        Raises:
            BusinessRuleError: If no default payment method is set.
        """
        customer = await self.client.retrieve_customer(customer_id)
        invoice_settings = getattr(customer, "invoice_settings", None)
        payment_method_id = expandable_id(
            getattr(invoice_settings, "default_payment_method", None)
        )
        if not payment_method_id:
            raise BusinessRuleError(
                "Customer does not have a default payment method set"
            )
        return payment_method_id

    async def charge_and_credit(
        self, customer_id: str, amount: Decimal | float | str | None
    ) -> stripe.CustomerBalanceTransaction:
        """
        Charge the default payment method and credit the same amount to the balance.

        The balance transaction is only posted once the charge has succeeded.
        """
        customer_id = _require_customer_id(customer_id)
        amount_in_cents = dollars_to_cents(amount)
        payment_method_id = await self.get_default_payment_method_id(customer_id)

        payment_intent = await self.client.create_off_session_payment(
            customer_id, payment_method_id, amount_in_cents
        )
        if payment_intent.status != PAYMENT_SUCCEEDED:
            logger.warning(
                f"Charge {payment_intent.id} for {customer_id} ended with "
                f"status {payment_intent.status}, balance not credited"
            )
            raise BusinessRuleError("Payment failed")

        transaction = await self.client.create_balance_transaction(
            customer_id, -amount_in_cents, CREDIT_DESCRIPTION
        )
        logger.info(f"Credited {amount_in_cents} cents to {customer_id}")
        return transaction

    async def debit(
        self, customer_id: str, amount: Decimal | float | str | None
    ) -> stripe.CustomerBalanceTransaction:
        """
        Debit the customer's credit balance.

        Rejected when the debit would leave the balance above zero, i.e. with
        the customer owing money.
        """
        customer_id = _require_customer_id(customer_id)
        amount_in_cents = dollars_to_cents(amount)

        customer = await self.client.retrieve_customer(customer_id)
        if getattr(customer, "deleted", False):
            raise NotFoundError("Customer has been deleted")

        current_balance = getattr(customer, "balance", None) or 0
        logger.info(f"Current balance for {customer_id}: {current_balance}")

        if current_balance + amount_in_cents > 0:
            logger.warning(
                f"Debit of {amount_in_cents} rejected for {customer_id}, "
                f"balance {current_balance}"
            )
            raise BusinessRuleError("Insufficient balance to cover the transaction")

        return await self.client.create_balance_transaction(
            customer_id, amount_in_cents, DEBIT_DESCRIPTION
        )

    async def initiate_checkout_credit(
        self, customer_id: str, amount: Decimal | float | str | None
    ) -> stripe.checkout.Session:
        """Create a one-time checkout session priced at the requested amount."""
        customer_id = _require_customer_id(customer_id)
        amount_in_cents = dollars_to_cents(amount)

        return await self.client.create_checkout_session(
            mode="payment",
            customer=customer_id,
            line_items=[
                {
                    "price_data": {
                        "currency": self.client.currency,
                        "product_data": {"name": CREDIT_PRODUCT_NAME},
                        "unit_amount": amount_in_cents,
                    },
                    "quantity": 1,
                }
            ],
            success_url=self._success_url(),
            cancel_url=self._cancel_url(customer_id),
        )

    async def recover_state(
        self,
        session_id: str | None = None,
        customer_id: str | None = None,
        canceled: bool = False,
    ) -> RecoveredState:
        """
        Rebuild workflow state from redirect query parameters.

        A session ID is resolved to its customer and any attached setup is
        completed. An explicit customer ID is adopted as-is without calling
        Stripe.
        """
        state = RecoveredState(canceled=canceled)

        if session_id:
            session = await self.client.retrieve_checkout_session(session_id)
            state.customer_id = expandable_id(session.customer)
            if getattr(session, "setup_intent", None):
                state.payment_method_id = await self._apply_setup(session)
                state.setup_completed = state.payment_method_id is not None

        if customer_id:
            state.customer_id = customer_id

        return state
