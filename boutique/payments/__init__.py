"""Feature 'payments': initiation (Stripe, Paystack) et journal des paiements."""
from .service import PaymentInitiation, initiate_payment, initiate_paystack_payment, initiate_stripe_payment

__all__ = ["PaymentInitiation", "initiate_payment", "initiate_paystack_payment", "initiate_stripe_payment"]
