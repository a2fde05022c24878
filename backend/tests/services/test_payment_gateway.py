"""StripePaymentGateway — SDK call shape, error mapping, and timeout."""

import time
from decimal import Decimal
from types import SimpleNamespace

import pytest
import stripe

from blood_center.core.errors import PaymentProviderError, UpstreamTimeoutError
from blood_center.infrastructure.payment_gateway import StripePaymentGateway


@pytest.fixture
def stripe_calls(monkeypatch):
    """Replace PaymentIntent.create; configure behaviour via the returned dict."""
    state = {"calls": [], "raise": None, "delay": 0.0}

    def fake_create(**kwargs):
        state["calls"].append(kwargs)
        if state["delay"]:
            time.sleep(state["delay"])
        if state["raise"] is not None:
            raise state["raise"]
        return SimpleNamespace(client_secret="pi_abc_secret_def")

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)
    return state


async def test_create_intent_sends_cents_and_returns_secret(stripe_calls):
    gateway = StripePaymentGateway("sk_test_x", currency="usd")

    secret = await gateway.create_intent(Decimal("25.50"))

    assert secret == "pi_abc_secret_def"
    assert stripe_calls["calls"] == [{
        "api_key": "sk_test_x",
        "amount": 2550,
        "currency": "usd",
        "payment_method_types": ["card"],
    }]


async def test_stripe_error_maps_to_payment_provider_error(stripe_calls):
    stripe_calls["raise"] = stripe.StripeError("Your card was declined.")
    gateway = StripePaymentGateway("sk_test_x")

    with pytest.raises(PaymentProviderError) as exc_info:
        await gateway.create_intent(Decimal("10"))
    assert exc_info.value.http_status == 502
    assert "Your card was declined." in exc_info.value.message


async def test_slow_stripe_call_times_out(stripe_calls):
    stripe_calls["delay"] = 0.5
    gateway = StripePaymentGateway("sk_test_x", timeout_seconds=0.05)

    with pytest.raises(UpstreamTimeoutError) as exc_info:
        await gateway.create_intent(Decimal("10"))
    assert exc_info.value.http_status == 504
