"""
Adaptateur Paystack (passerelle B): initialisation de transaction et vérification
de signature des webhooks (HMAC-SHA512 hexadécimal du corps brut).
"""
from typing import Any, Dict, List, Optional
import hashlib
import hmac
import logging
import secrets
import time

import httpx

from boutique.config import PAYSTACK_BASE_URL, PAYSTACK_CHANNELS, PAYSTACK_SECRET_KEY, PAYSTACK_WEBHOOK_SECRET
from boutique.utils.errors import SignatureVerificationError, UpstreamGatewayError

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "LLW"
TIMEOUT_SECONDS = 10.0

def generate_reference() -> str:
    """Référence unique: LLW_<epoch ms>_<9 caractères aléatoires>."""
    return f"{REFERENCE_PREFIX}_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"

def initialize_transaction(
    *,
    email: str,
    amount_minor: int,
    currency: str,
    metadata: Dict[str, Any],
    reference: Optional[str] = None,
    channels: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    POST /transaction/initialize.
    Retour: {"reference", "authorization_url", "access_code"}.
    Lève UpstreamGatewayError sur erreur réseau, statut HTTP non 2xx ou réponse status=false.
    """
    if not PAYSTACK_SECRET_KEY:
        raise UpstreamGatewayError(detail="PAYSTACK_SECRET_KEY manquant")
    body = {
        "email": email,
        "amount": amount_minor,
        "currency": currency.upper(),
        "reference": reference or generate_reference(),
        "metadata": metadata,
        "channels": channels or PAYSTACK_CHANNELS,
    }
    headers = {"Authorization": f"Bearer {PAYSTACK_SECRET_KEY}"}
    try:
        resp = httpx.post(
            f"{PAYSTACK_BASE_URL}/transaction/initialize",
            json=body,
            headers=headers,
            timeout=TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        payload = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.exception("paystack.initialize_transaction failed reference=%s", body["reference"])
        raise UpstreamGatewayError(detail=str(e)) from e

    if not payload.get("status"):
        logger.error("paystack.initialize_transaction refused: %s", payload.get("message"))
        raise UpstreamGatewayError(detail=str(payload.get("message") or "status=false"))
    data = payload.get("data") or {}
    return {
        "reference": data.get("reference") or body["reference"],
        "authorization_url": data.get("authorization_url"),
        "access_code": data.get("access_code"),
    }

def compute_signature(payload: bytes, secret: Optional[str] = None) -> str:
    key = (secret if secret is not None else PAYSTACK_WEBHOOK_SECRET) or ""
    return hmac.new(key.encode("utf-8"), payload, hashlib.sha512).hexdigest()

def verify_signature(payload: bytes, signature: Optional[str]) -> None:
    """Comparaison en temps constant; lève SignatureVerificationError si invalide."""
    if not signature or not PAYSTACK_WEBHOOK_SECRET:
        raise SignatureVerificationError(detail="missing signature or secret")
    if not hmac.compare_digest(compute_signature(payload), signature.strip().lower()):
        logger.warning("paystack webhook signature mismatch")
        raise SignatureVerificationError(detail="signature mismatch")
