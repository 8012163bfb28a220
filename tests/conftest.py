import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import get_payment_client, get_payment_client_or_none
from core.config import Settings
from core.exceptions import PaymentProviderError


class FakePaymentClient:
    """In-memory stand-in for PaymentClient that records every call."""

    currency = "usd"

    def __init__(self):
        self.calls = []
        self.customers = {}
        self.sessions = {}
        self.setup_intents = {}
        self.subscriptions = {}
        self.balance_transactions = []
        self.payment_status = "succeeded"
        self.fail_with = {}
        self._ids = itertools.count(1)

    def _next_id(self, prefix):
        return f"{prefix}_{next(self._ids)}"

    def _record(self, name, *args):
        self.calls.append((name, args))
        if name in self.fail_with:
            raise PaymentProviderError(self.fail_with[name])

    def call_names(self):
        return [name for name, _ in self.calls]

    # Seeding helpers

    def add_customer(self, email=None, balance=0, default_payment_method=None,
                     customer_id=None, deleted=False):
        customer = SimpleNamespace(
            id=customer_id or self._next_id("cus"),
            email=email,
            name=None,
            balance=balance,
            deleted=deleted,
            invoice_settings=SimpleNamespace(
                default_payment_method=default_payment_method
            ),
        )
        self.customers[customer.id] = customer
        return customer

    def add_session(self, customer=None, setup_intent=None, email=None,
                    session_id=None):
        session = SimpleNamespace(
            id=session_id or self._next_id("cs"),
            customer=customer,
            setup_intent=setup_intent,
            customer_details=SimpleNamespace(email=email) if email else None,
            url="https://checkout.stripe.test/session",
        )
        self.sessions[session.id] = session
        return session

    def add_setup_intent(self, payment_method=None, setup_intent_id=None):
        setup_intent = SimpleNamespace(
            id=setup_intent_id or self._next_id("seti"),
            payment_method=payment_method,
            client_secret="seti_secret",
        )
        self.setup_intents[setup_intent.id] = setup_intent
        return setup_intent

    def add_subscription(self, customer_id, status, subscription_id=None):
        subscription = SimpleNamespace(
            id=subscription_id or self._next_id("sub"),
            customer=customer_id,
            status=status,
            cancel_at_period_end=False,
            current_period_end=1767225600,
        )
        self.subscriptions[subscription.id] = subscription
        return subscription

    # PaymentClient interface

    async def create_customer(self, email, name=None):
        self._record("create_customer", email, name)
        customer = self.add_customer(email=email)
        customer.name = name
        return customer

    async def retrieve_customer(self, customer_id, expand=None):
        self._record("retrieve_customer", customer_id, expand)
        if customer_id not in self.customers:
            raise PaymentProviderError(f"No such customer: '{customer_id}'", 404)
        return self.customers[customer_id]

    async def list_customers_by_email(self, email, limit=1):
        self._record("list_customers_by_email", email, limit)
        matches = [c for c in self.customers.values() if c.email == email]
        return matches[:limit]

    async def set_default_payment_method(self, customer_id, payment_method_id):
        self._record("set_default_payment_method", customer_id, payment_method_id)
        customer = self.customers[customer_id]
        customer.invoice_settings.default_payment_method = payment_method_id
        return customer

    async def create_balance_transaction(self, customer_id, amount, description):
        self._record("create_balance_transaction", customer_id, amount, description)
        transaction = SimpleNamespace(
            id=self._next_id("cbtxn"),
            amount=amount,
            currency=self.currency,
            description=description,
        )
        self.balance_transactions.append(transaction)
        if customer_id in self.customers:
            self.customers[customer_id].balance += amount
        return transaction

    async def create_checkout_session(self, **params):
        self._record("create_checkout_session", params)
        session = self.add_session(customer=params.get("customer"))
        session.params = params
        return session

    async def retrieve_checkout_session(self, session_id):
        self._record("retrieve_checkout_session", session_id)
        if session_id not in self.sessions:
            raise PaymentProviderError(f"No such checkout.session: '{session_id}'")
        return self.sessions[session_id]

    async def create_portal_session(self, customer_id, return_url):
        self._record("create_portal_session", customer_id, return_url)
        return SimpleNamespace(
            id=self._next_id("bps"),
            url="https://billing.stripe.test/portal",
            return_url=return_url,
        )

    async def create_setup_intent(self, customer_id):
        self._record("create_setup_intent", customer_id)
        return self.add_setup_intent()

    async def retrieve_setup_intent(self, setup_intent_id):
        self._record("retrieve_setup_intent", setup_intent_id)
        return self.setup_intents[setup_intent_id]

    async def create_off_session_payment(self, customer_id, payment_method_id, amount):
        self._record("create_off_session_payment", customer_id, payment_method_id, amount)
        return SimpleNamespace(id=self._next_id("pi"), status=self.payment_status)

    async def list_subscriptions(self, customer_id):
        self._record("list_subscriptions", customer_id)
        return [s for s in self.subscriptions.values() if s.customer == customer_id]

    async def cancel_subscription_at_period_end(self, subscription_id):
        self._record("cancel_subscription_at_period_end", subscription_id)
        subscription = self.subscriptions[subscription_id]
        subscription.cancel_at_period_end = True
        return subscription


@pytest.fixture
def fake_client():
    return FakePaymentClient()


@pytest.fixture
def test_settings():
    return Settings(
        stripe_secret_key="sk_test_123",
        public_url="https://shop.example.test",
        stripe_price_id_basic="price_basic",
        stripe_price_id_basic_yearly="price_basic_yearly",
        stripe_price_id_pro="price_pro",
        stripe_price_id_pro_yearly="price_pro_yearly",
    )


@pytest.fixture
def client(fake_client):
    """Test client with the payment client dependency replaced."""
    app.dependency_overrides[get_payment_client] = lambda: fake_client
    app.dependency_overrides[get_payment_client_or_none] = lambda: fake_client

    with TestClient(app) as c:
        yield c

    app.dependency_overrides = {}
