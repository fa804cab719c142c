"""Webhooks des passerelles (/api/webhook/*).
- Signature vérifiée sur le corps brut avant toute lecture: 400 sinon, aucune mutation
- Corps signé mais JSON invalide: 400
- Événement vérifié: toujours 200, y compris type inconnu ou échec de traitement
  (journalisé), pour éviter les rafales de renvois de la passerelle
"""
from typing import Any, Callable, Dict
import json
import logging

from fastapi import APIRouter, Request

from boutique.payments import paystack_client, stripe_client
from boutique.utils.errors import ValidationError
from .events import WebhookEvent, parse_paystack_event, parse_stripe_event
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/webhook", tags=["Webhooks"])

def _decode(payload: bytes) -> Dict[str, Any]:
    try:
        data = json.loads(payload)
    except ValueError:
        raise ValidationError("Invalid payload")
    if not isinstance(data, dict):
        raise ValidationError("Invalid payload")
    return data

def _process(gateway: str, data: Dict[str, Any], parse: Callable[[Dict[str, Any]], WebhookEvent]) -> Dict[str, Any]:
    try:
        result = service.handle_event(parse(data))
    except Exception:
        logger.exception("webhook processing failed gateway=%s", gateway)
        return {"received": True, "processed": False}
    return {"received": True, "processed": True, "action": result.get("action")}

@router.post("/stripe", include_in_schema=False)
async def stripe_webhook(request: Request):
    payload = await request.body()
    stripe_client.verify_event(payload, request.headers.get("stripe-signature") or "")
    return _process("stripe", _decode(payload), parse_stripe_event)

@router.post("/paystack", include_in_schema=False)
async def paystack_webhook(request: Request):
    payload = await request.body()
    paystack_client.verify_signature(payload, request.headers.get("x-paystack-signature"))
    return _process("paystack", _decode(payload), parse_paystack_event)
