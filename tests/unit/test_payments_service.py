import pytest

from boutique.payments import service
from boutique.utils.errors import UpstreamGatewayError, ValidationError


@pytest.fixture
def stripe_calls(monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return {"id": "pi_123", "client_secret": "pi_123_secret"}

    monkeypatch.setattr("boutique.payments.stripe_client.create_payment_intent", fake_create)
    return calls


@pytest.fixture
def paystack_calls(monkeypatch):
    calls = []

    def fake_init(**kwargs):
        calls.append(kwargs)
        return {"reference": "LLW_1_abc", "authorization_url": "https://checkout.paystack.com/x", "access_code": "ac"}

    monkeypatch.setattr("boutique.payments.paystack_client.initialize_transaction", fake_init)
    return calls


@pytest.mark.parametrize("amount", [None, 0, -5, "abc", float("inf"), float("nan"), "1e400", "-inf"])
def test_invalid_amount_rejected_before_gateway(fake_db, stripe_calls, amount):
    with pytest.raises(ValidationError):
        service.initiate_stripe_payment(amount)
    assert stripe_calls == []


def test_stripe_payment_uses_minor_units_and_tags_source(fake_db, stripe_calls):
    result = service.initiate_stripe_payment(244.4, "USD", {"orderId": "ord-1", "attempt": 2})

    assert result.reference == "pi_123"
    assert result.client_secret == "pi_123_secret"
    call = stripe_calls[0]
    assert call["amount_minor"] == 24440
    assert call["currency"] == "usd"
    assert call["metadata"] == {"orderId": "ord-1", "attempt": "2", "source": "lenox-luxury-watches"}
    assert fake_db.payment_intents[0]["status"] == "created"
    assert fake_db.payment_intents[0]["gateway"] == "stripe"


def test_stripe_failure_is_upstream_error_and_not_logged(fake_db, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("card declined")
    monkeypatch.setattr("boutique.payments.stripe_client.create_payment_intent", boom)
    with pytest.raises(UpstreamGatewayError):
        service.initiate_stripe_payment(10)
    assert fake_db.payment_intents == []


def test_log_failure_does_not_block_payment(stripe_calls, monkeypatch):
    monkeypatch.setattr("boutique.payments.repository.log_payment_intent", lambda **kw: None)
    assert service.initiate_stripe_payment(10).reference == "pi_123"


def test_paystack_requires_email(fake_db, paystack_calls):
    with pytest.raises(ValidationError):
        service.initiate_paystack_payment(5000, None)
    assert paystack_calls == []


@pytest.mark.parametrize("amount", [float("inf"), float("nan")])
def test_paystack_rejects_non_finite_amount(fake_db, paystack_calls, amount):
    with pytest.raises(ValidationError) as exc:
        service.initiate_paystack_payment(amount, "buyer@example.com")
    assert exc.value.message == "Invalid amount"
    assert paystack_calls == []


def test_paystack_initialization(fake_db, paystack_calls):
    result = service.initiate_paystack_payment(5000, " buyer@example.com ", "ngn")
    assert result.reference == "LLW_1_abc"
    assert result.authorization_url.startswith("https://checkout.paystack.com/")
    assert paystack_calls[0]["amount_minor"] == 500000
    assert paystack_calls[0]["currency"] == "NGN"
    assert paystack_calls[0]["email"] == "buyer@example.com"
    assert fake_db.payment_intents[0]["status"] == "initialized"


def test_initiate_payment_dispatch(fake_db, stripe_calls, paystack_calls):
    assert service.initiate_payment("stripe", 10).gateway == "stripe"
    assert service.initiate_payment("paystack", 10, customer={"email": "a@b.c"}).gateway == "paystack"
    with pytest.raises(ValidationError):
        service.initiate_payment("paypal", 10)
