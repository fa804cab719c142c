import logging

from fastapi import APIRouter, Depends

from boutique.utils.rate_limit import optional_rate_limit
from .models import InitializePaymentRequest, PaymentIntentRequest
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Payments API"])

# module boutique.payments.views
@router.post("/create-payment-intent", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_payment_intent(req: PaymentIntentRequest):
    """
    Passerelle A (Stripe): crée un PaymentIntent.
    - Entrée JSON: {amount, currency="usd", metadata={}}
    - Réponse: {clientSecret, paymentIntentId}
    - Erreurs: 400 montant invalide, 502 passerelle indisponible
    """
    result = service.initiate_stripe_payment(req.amount, req.currency, req.metadata)
    return {"clientSecret": result.client_secret, "paymentIntentId": result.reference}

@router.post("/initialize-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def initialize_payment(req: InitializePaymentRequest):
    """
    Passerelle B (Paystack): initialise une transaction.
    - Entrée JSON: {amount, currency="ngn", email, metadata={}}
    - Réponse: {reference, authorization_url, access_code}
    """
    result = service.initiate_paystack_payment(req.amount, req.email, req.currency, req.metadata)
    return {
        "reference": result.reference,
        "authorization_url": result.authorization_url,
        "access_code": result.access_code,
    }
