"""
Cas d'usage 'payments': initiation d'un paiement auprès de l'une des deux passerelles.
- Validation: montant > 0; email obligatoire pour Paystack
- Métadonnées: valeurs converties en chaînes + tag source de la boutique
- Journal local best-effort (payment_intents, statut created/initialized)
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import math

from boutique.checkout.totals import to_minor_units
from boutique.config import PAYMENT_SOURCE_TAG
from boutique.utils.errors import UpstreamGatewayError, ValidationError
from . import paystack_client, repository, stripe_client

logger = logging.getLogger(__name__)

STRIPE = "stripe"
PAYSTACK = "paystack"


@dataclass(frozen=True)
class PaymentInitiation:
    gateway: str
    reference: str
    client_secret: Optional[str] = None
    authorization_url: Optional[str] = None
    access_code: Optional[str] = None


def _validate_amount(amount: Any) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("Invalid amount")
    # inf/nan passent float(); refusés avant toute conversion en unités mineures
    if not math.isfinite(value) or value <= 0:
        raise ValidationError("Invalid amount")
    return value

def _gateway_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, str]:
    meta = {str(k): str(v) for k, v in (metadata or {}).items() if v is not None}
    meta["source"] = PAYMENT_SOURCE_TAG
    return meta

def initiate_stripe_payment(amount: Any, currency: str = "usd", metadata: Optional[Dict[str, Any]] = None) -> PaymentInitiation:
    value = _validate_amount(amount)
    currency = (currency or "usd").lower()
    try:
        intent = stripe_client.create_payment_intent(
            amount_minor=to_minor_units(value),
            currency=currency,
            metadata=_gateway_metadata(metadata),
        )
    except Exception as e:
        logger.exception("payments.initiate_stripe_payment failed")
        raise UpstreamGatewayError("Failed to create payment intent", detail=str(e)) from e

    reference = str(intent.get("id") or "")
    repository.log_payment_intent(
        gateway=STRIPE, reference=reference, amount=value, currency=currency,
        status="created", metadata=metadata or {},
    )
    return PaymentInitiation(gateway=STRIPE, reference=reference, client_secret=intent.get("client_secret"))

def initiate_paystack_payment(
    amount: Any,
    email: Optional[str],
    currency: str = "ngn",
    metadata: Optional[Dict[str, Any]] = None,
) -> PaymentInitiation:
    value = _validate_amount(amount)
    if not (email or "").strip():
        raise ValidationError("Email is required")
    currency = (currency or "ngn").upper()
    result = paystack_client.initialize_transaction(
        email=email.strip(),
        amount_minor=to_minor_units(value),
        currency=currency,
        metadata=_gateway_metadata(metadata),
    )
    reference = result["reference"]
    repository.log_payment_intent(
        gateway=PAYSTACK, reference=reference, amount=value, currency=currency,
        status="initialized", metadata=metadata or {},
    )
    return PaymentInitiation(
        gateway=PAYSTACK,
        reference=reference,
        authorization_url=result.get("authorization_url"),
        access_code=result.get("access_code"),
    )

def initiate_payment(
    gateway: str,
    amount: Any,
    currency: Optional[str] = None,
    customer: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> PaymentInitiation:
    """Point d'entrée unique; le choix de la passerelle revient à l'appelant."""
    if gateway == STRIPE:
        return initiate_stripe_payment(amount, currency or "usd", metadata)
    if gateway == PAYSTACK:
        email = (customer or {}).get("email")
        return initiate_paystack_payment(amount, email, currency or "ngn", metadata)
    raise ValidationError(f"Unsupported payment gateway: {gateway}")
