"""
Adaptateur Stripe (passerelle A): centralise les appels et la configuration Stripe.
"""
from typing import Any, Dict
import logging
import stripe
from boutique.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET
from boutique.utils.errors import SignatureVerificationError

logger = logging.getLogger(__name__)

# module boutique.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def create_payment_intent(*, amount_minor: int, currency: str, metadata: Dict[str, str]) -> Dict[str, Any]:
    """
    Crée un PaymentIntent Stripe.
    - amount_minor: montant en plus petite unité (centimes)
    - metadata: valeurs chaînes uniquement (contrainte Stripe)
    Retour: dict incluant "id" et "client_secret".
    """
    require_stripe()
    intent = stripe.PaymentIntent.create(
        amount=amount_minor,
        currency=currency.lower(),
        automatic_payment_methods={"enabled": True},
        metadata=metadata,
    )
    # stripe retourne un objet; on le traite comme dict-compatible
    return dict(intent)

def verify_event(payload: bytes, sig_header: str) -> None:
    """
    Valide la signature d'un webhook (en-tête Stripe-Signature + STRIPE_WEBHOOK_SECRET).
    Lève SignatureVerificationError si l'en-tête est absent ou la signature invalide.
    """
    if not sig_header:
        raise SignatureVerificationError(detail="missing stripe-signature header")
    require_stripe()
    try:
        stripe.Webhook.construct_event(payload, sig_header, STRIPE_WEBHOOK_SECRET or "")
    except Exception as e:
        logger.warning("stripe webhook signature verification failed: %s", e)
        raise SignatureVerificationError(detail=str(e)) from e
