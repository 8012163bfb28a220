import asyncio
from types import SimpleNamespace

import pytest

from core.constants import BillingInterval, PlanType
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from services.subscription_service import (
    SubscriptionService,
    _current_period_end,
    get_plan,
    list_plans,
)


@pytest.fixture
def service(fake_client, test_settings):
    return SubscriptionService(fake_client, test_settings)


def test_list_plans_uses_configured_price_ids(test_settings):
    plans = {plan.id: plan for plan in list_plans(test_settings)}

    assert set(plans) == {PlanType.BASIC, PlanType.PRO, PlanType.ENTERPRISE}
    assert plans[PlanType.BASIC].price_id == "price_basic"
    assert plans[PlanType.PRO].price_id_yearly == "price_pro_yearly"
    assert plans[PlanType.PRO].popular is True


def test_get_plan_rejects_unknown_plan(test_settings):
    with pytest.raises(ValidationError, match="Invalid plan type"):
        get_plan("platinum", test_settings)


def test_get_or_create_customer_is_idempotent(service, fake_client):
    first = asyncio.run(service.get_or_create_customer("bob@example.com"))
    second = asyncio.run(service.get_or_create_customer("bob@example.com"))

    assert first.id == second.id
    assert fake_client.call_names().count("create_customer") == 1


def test_get_customer_returns_none_when_missing(service, fake_client):
    assert asyncio.run(service.get_customer("nobody@example.com")) is None
    assert fake_client.call_names() == ["list_customers_by_email"]


def test_get_customer_expands_subscriptions(service, fake_client):
    customer = fake_client.add_customer(email="carol@example.com")

    found = asyncio.run(service.get_customer("carol@example.com"))

    assert found is customer
    assert ("retrieve_customer", (customer.id, ["subscriptions"])) in fake_client.calls


def test_get_customer_with_subscriptions(service, fake_client):
    customer = fake_client.add_customer(email="dave@example.com")
    fake_client.add_subscription(customer.id, "canceled")
    fake_client.add_subscription(customer.id, "active")

    found, subscriptions = asyncio.run(
        service.get_customer_with_subscriptions("dave@example.com")
    )

    assert found is customer
    assert [s.status for s in subscriptions] == ["canceled", "active"]


def test_create_checkout_session_for_plan(service, fake_client):
    session = asyncio.run(service.create_checkout_session("erin@example.com", "pro"))

    params = session.params
    assert params["mode"] == "subscription"
    assert params["line_items"] == [{"price": "price_pro", "quantity": 1}]
    assert params["success_url"] == (
        "https://shop.example.test/subscription/success"
        "?session_id={CHECKOUT_SESSION_ID}"
    )
    assert params["cancel_url"] == "https://shop.example.test/subscription/pro"
    assert params["billing_address_collection"] == "required"
    assert params["allow_promotion_codes"] is False
    assert params["customer_update"] == {"address": "auto", "name": "auto"}
    assert fake_client.customers[params["customer"]].email == "erin@example.com"


def test_create_checkout_session_yearly(service, fake_client):
    session = asyncio.run(
        service.create_checkout_session(
            "erin@example.com", PlanType.BASIC, BillingInterval.YEARLY
        )
    )

    assert session.params["line_items"][0]["price"] == "price_basic_yearly"


def test_create_checkout_session_rejects_bad_input_before_calls(service, fake_client):
    with pytest.raises(ValidationError, match="Invalid plan type"):
        asyncio.run(service.create_checkout_session("erin@example.com", "gold"))
    with pytest.raises(ValidationError, match="email"):
        asyncio.run(service.create_checkout_session("  ", "basic"))

    assert fake_client.calls == []


def test_billing_portal_session_for_checkout(service, fake_client):
    customer = fake_client.add_customer(email="fay@example.com")
    session = fake_client.add_session(customer=customer.id, email="fay@example.com")

    portal = asyncio.run(service.create_billing_portal_session(session.id))

    assert portal.url.startswith("https://billing.stripe.test")
    assert portal.return_url == (
        f"https://shop.example.test/subscription/success?session_id={session.id}"
    )


def test_billing_portal_requires_session_email(service, fake_client):
    session = fake_client.add_session(customer="cus_1")

    with pytest.raises(NotFoundError, match="Email not found in session"):
        asyncio.run(service.create_billing_portal_session(session.id))


def test_billing_portal_requires_known_customer(service, fake_client):
    session = fake_client.add_session(email="ghost@example.com")

    with pytest.raises(NotFoundError, match="Customer not found"):
        asyncio.run(service.create_billing_portal_session(session.id))


def test_cancel_picks_first_active_or_trialing(service, fake_client):
    customer = fake_client.add_customer(email="gus@example.com")
    fake_client.add_subscription(customer.id, "canceled", "sub_old")
    fake_client.add_subscription(customer.id, "trialing", "sub_trial")
    fake_client.add_subscription(customer.id, "active", "sub_active")
    session = fake_client.add_session(customer=customer.id, email="gus@example.com")

    result = asyncio.run(service.cancel_subscription(session.id))

    assert result.subscription_id == "sub_trial"
    assert result.cancel_at_period_end is True
    assert result.current_period_end == 1767225600
    assert fake_client.subscriptions["sub_active"].cancel_at_period_end is False
    assert fake_client.subscriptions["sub_old"].cancel_at_period_end is False


def test_cancel_without_active_subscription_fails(service, fake_client):
    customer = fake_client.add_customer(email="hal@example.com")
    fake_client.add_subscription(customer.id, "canceled")
    session = fake_client.add_session(customer=customer.id, email="hal@example.com")

    with pytest.raises(BusinessRuleError, match="No active subscription"):
        asyncio.run(service.cancel_subscription(session.id))

    assert "cancel_subscription_at_period_end" not in fake_client.call_names()


def test_cancel_requires_session_id(service, fake_client):
    with pytest.raises(ValidationError, match="No session ID found"):
        asyncio.run(service.cancel_subscription(""))


def test_current_period_end_falls_back_to_items():
    subscription = {"items": SimpleNamespace(data=[SimpleNamespace(current_period_end=42)])}
    assert _current_period_end(subscription) == 42
    assert _current_period_end(SimpleNamespace(current_period_end=7)) == 7
    assert _current_period_end(SimpleNamespace()) is None
