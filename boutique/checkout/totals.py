"""
Calcul des montants du checkout (taxe, livraison, total) et conversion en unités mineures.
Le total est figé au moment du checkout: total = subtotal + tax + shipping.
"""
from dataclasses import dataclass
from boutique.config import TAX_RATE, FREE_SHIPPING_THRESHOLD, FLAT_SHIPPING_AMOUNT


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: float
    tax: float
    shipping: float
    total: float

    def as_payload(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "taxAmount": self.tax,
            "shippingAmount": self.shipping,
            "totalAmount": self.total,
        }


def compute_totals(subtotal: float) -> CheckoutTotals:
    # Livraison offerte strictement au-delà du seuil
    subtotal = round(float(subtotal), 2)
    shipping = 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else float(FLAT_SHIPPING_AMOUNT)
    tax = round(subtotal * TAX_RATE, 2)
    total = round(subtotal + tax + shipping, 2)
    return CheckoutTotals(subtotal=subtotal, tax=tax, shipping=shipping, total=total)


def totals_consistent(subtotal: float, tax: float, shipping: float, total: float, tolerance: float = 0.01) -> bool:
    return abs((subtotal + tax + shipping) - total) <= tolerance


def to_minor_units(amount: float) -> int:
    """Montant -> plus petite unité (centimes, kobo)."""
    return int(round(float(amount) * 100))


def from_minor_units(amount: int) -> float:
    return (amount or 0) / 100
