"""
Événements de passerelle normalisés en une union fermée:
PaymentSucceeded | PaymentFailed | DisputeCreated | UnrecognizedEvent.
Tout type inconnu devient UnrecognizedEvent (accepté puis ignoré).

event_key: identifiant de déduplication du grand livre
- id d'événement de la passerelle si présent ("stripe:evt_...")
- sinon passerelle + type + référence ("paystack:charge.success:LLW_...")
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import json

from boutique.checkout.totals import from_minor_units


@dataclass(frozen=True)
class PaymentSucceeded:
    gateway: str
    event_key: str
    reference: str
    amount: float
    currency: str
    order_id: Optional[str] = None


@dataclass(frozen=True)
class PaymentFailed:
    gateway: str
    event_key: str
    reference: str
    order_id: Optional[str] = None


@dataclass(frozen=True)
class DisputeCreated:
    gateway: str
    event_key: str
    reference: str
    amount: float
    currency: str
    reason: str = ""


@dataclass(frozen=True)
class UnrecognizedEvent:
    gateway: str
    event_type: str


WebhookEvent = Union[PaymentSucceeded, PaymentFailed, DisputeCreated, UnrecognizedEvent]


def _event_key(gateway: str, event_id: Any, event_type: str, reference: str) -> str:
    if event_id:
        return f"{gateway}:{event_id}"
    return f"{gateway}:{event_type}:{reference}"


def order_id_from_metadata(metadata: Any) -> Optional[str]:
    """metadata.orderId (ou order_id); Paystack peut envoyer la metadata sérialisée en JSON."""
    if isinstance(metadata, str):
        try:
            metadata = json.loads(metadata) if metadata else {}
        except ValueError:
            return None
    if not isinstance(metadata, dict):
        return None
    value = metadata.get("orderId") or metadata.get("order_id")
    return str(value) if value else None


def parse_stripe_event(event: Dict[str, Any]) -> WebhookEvent:
    event_type = str(event.get("type") or "")
    obj = (event.get("data") or {}).get("object") or {}
    event_id = event.get("id")

    if event_type in ("payment_intent.succeeded", "payment_intent.payment_failed"):
        reference = str(obj.get("id") or "")
        key = _event_key("stripe", event_id, event_type, reference)
        order_id = order_id_from_metadata(obj.get("metadata"))
        if event_type == "payment_intent.succeeded":
            return PaymentSucceeded(
                gateway="stripe",
                event_key=key,
                reference=reference,
                amount=from_minor_units(obj.get("amount") or 0),
                currency=str(obj.get("currency") or "").upper(),
                order_id=order_id,
            )
        return PaymentFailed(gateway="stripe", event_key=key, reference=reference, order_id=order_id)

    if event_type == "charge.dispute.created":
        reference = str(obj.get("charge") or obj.get("id") or "")
        return DisputeCreated(
            gateway="stripe",
            event_key=_event_key("stripe", event_id, event_type, reference),
            reference=reference,
            amount=from_minor_units(obj.get("amount") or 0),
            currency=str(obj.get("currency") or "").upper(),
            reason=str(obj.get("reason") or ""),
        )

    return UnrecognizedEvent(gateway="stripe", event_type=event_type)


def parse_paystack_event(event: Dict[str, Any]) -> WebhookEvent:
    event_type = str(event.get("event") or "")
    data = event.get("data") or {}

    if event_type in ("charge.success", "charge.failed"):
        reference = str(data.get("reference") or "")
        key = _event_key("paystack", None, event_type, reference)
        order_id = order_id_from_metadata(data.get("metadata"))
        if event_type == "charge.success":
            return PaymentSucceeded(
                gateway="paystack",
                event_key=key,
                reference=reference,
                amount=from_minor_units(data.get("amount") or 0),
                currency=str(data.get("currency") or "").upper(),
                order_id=order_id,
            )
        return PaymentFailed(gateway="paystack", event_key=key, reference=reference, order_id=order_id)

    if event_type == "dispute.create":
        transaction = data.get("transaction") or {}
        reference = str(transaction.get("reference") or "")
        return DisputeCreated(
            gateway="paystack",
            event_key=_event_key("paystack", None, event_type, reference),
            reference=reference,
            amount=from_minor_units(transaction.get("amount") or 0),
            currency=str(transaction.get("currency") or "").upper(),
            reason=str(data.get("reason") or ""),
        )

    return UnrecognizedEvent(gateway="paystack", event_type=event_type)
