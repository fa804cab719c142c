"""
Réconciliation des webhooks de paiement.
Machine à états par PaymentIntent: created/initialized -> succeeded | failed.
- Mises à jour de statut: « set to X » idempotentes (rejouables, dernier écrit gagne)
- Grand livre: une écriture par event_key (upsert ignore_duplicates)
"""
from typing import Any, Dict
import logging

from boutique.orders import repository as orders_repository
from boutique.payments import repository as payments_repository
from .events import DisputeCreated, PaymentFailed, PaymentSucceeded, UnrecognizedEvent, WebhookEvent

logger = logging.getLogger(__name__)

def _on_succeeded(event: PaymentSucceeded) -> Dict[str, Any]:
    payments_repository.update_payment_intent_status(gateway=event.gateway, reference=event.reference, status="succeeded")
    if event.order_id:
        orders_repository.update_order_status(event.order_id, status="processing", payment_status="paid")
    created = payments_repository.record_financial_transaction({
        "event_key": event.event_key,
        "type": "payment_received",
        "amount": event.amount,
        "currency": event.currency,
        "gateway": event.gateway,
        "gateway_reference": event.reference,
        "order_id": event.order_id,
        "status": "completed",
    })
    if not created:
        logger.info("webhook duplicate ledger entry ignored event_key=%s", event.event_key)
    return {"action": "payment_succeeded", "ledger_created": created}

def _on_failed(event: PaymentFailed) -> Dict[str, Any]:
    payments_repository.update_payment_intent_status(gateway=event.gateway, reference=event.reference, status="failed")
    if event.order_id:
        orders_repository.update_order_status(event.order_id, status="cancelled", payment_status="failed")
    return {"action": "payment_failed"}

def _on_dispute(event: DisputeCreated) -> Dict[str, Any]:
    # Rétrofacturation: montant négatif, indépendant du statut du PaymentIntent
    created = payments_repository.record_financial_transaction({
        "event_key": event.event_key,
        "type": "dispute_created",
        "amount": -abs(event.amount),
        "currency": event.currency,
        "gateway": event.gateway,
        "gateway_reference": event.reference,
        "status": "pending",
        "notes": f"Dispute reason: {event.reason}",
    })
    return {"action": "dispute_created", "ledger_created": created}

def handle_event(event: WebhookEvent) -> Dict[str, Any]:
    """Applique l'événement; PersistenceError se propage vers la vue."""
    if isinstance(event, PaymentSucceeded):
        result = _on_succeeded(event)
    elif isinstance(event, PaymentFailed):
        result = _on_failed(event)
    elif isinstance(event, DisputeCreated):
        result = _on_dispute(event)
    elif isinstance(event, UnrecognizedEvent):
        logger.info("webhook unhandled event gateway=%s type=%s", event.gateway, event.event_type)
        return {"action": "ignored"}
    else:
        raise TypeError(f"Unsupported webhook event: {event!r}")
    logger.info("webhook %s gateway=%s reference=%s", result["action"], event.gateway, event.reference)
    return result
