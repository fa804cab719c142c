"""
Conversion et affichage des prix.
- Les prix sont stockés dans la devise canonique (CANONICAL_CURRENCY, USD par défaut):
  c'est aussi la devise des totaux du checkout et du débit Stripe
- Table de taux statique: rate[code] = valeur de 1 unité canonique dans la devise code
- Aucune récupération distante des taux
- La devise choisie est une préférence stockée localement (clé 'preferred-currency');
  avant hydrate(), la devise canonique est utilisée (premier rendu serveur déterministe)
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import math

from boutique.config import CANONICAL_CURRENCY
from boutique.utils.local_storage import LocalStorage

PREFERENCE_KEY = "preferred-currency"

# Valeur de 1 NGN dans chaque devise (environ 830 NGN = 1 USD)
_PER_NGN: Dict[str, float] = {
    "NGN": 1.0,
    "USD": 0.0012,
    "EUR": 0.0011,
    "GBP": 0.00095,
    "CAD": 0.0016,
    "AUD": 0.0018,
}

BASE_CURRENCY = CANONICAL_CURRENCY if CANONICAL_CURRENCY in _PER_NGN else "USD"


def _rate(code: str) -> float:
    return _PER_NGN[code] / _PER_NGN[BASE_CURRENCY]


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str
    rate: float
    decimals: int = 2


SUPPORTED_CURRENCIES: List[Currency] = [
    Currency("NGN", "Nigerian Naira", "₦", _rate("NGN"), decimals=0),
    Currency("USD", "US Dollar", "$", _rate("USD"), decimals=0),
    Currency("EUR", "Euro", "€", _rate("EUR")),
    Currency("GBP", "British Pound", "£", _rate("GBP")),
    Currency("CAD", "Canadian Dollar", "C$", _rate("CAD")),
    Currency("AUD", "Australian Dollar", "A$", _rate("AUD")),
]

CURRENCIES_BY_CODE: Dict[str, Currency] = {c.code: c for c in SUPPORTED_CURRENCIES}


def get_currency(code: Optional[str]) -> Optional[Currency]:
    return CURRENCIES_BY_CODE.get((code or "").upper())


def get_exchange_rate(from_code: str, to_code: str) -> float:
    """Taux croisé via la devise canonique; 1.0 pour une devise inconnue."""
    if (from_code or "").upper() == (to_code or "").upper():
        return 1.0
    src = get_currency(from_code)
    dst = get_currency(to_code)
    from_rate = src.rate if src else 1.0
    to_rate = dst.rate if dst else 1.0
    return to_rate / from_rate


def format_amount(amount: float, currency: Currency) -> str:
    if not isinstance(amount, (int, float)) or math.isnan(amount) or math.isinf(amount):
        return f"{currency.symbol}{amount}"
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency.symbol}{abs(amount):,.{currency.decimals}f}"


class CurrencyConverter:
    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage
        self.selected: Currency = CURRENCIES_BY_CODE[BASE_CURRENCY]

    @property
    def currencies(self) -> List[Currency]:
        return list(SUPPORTED_CURRENCIES)

    def hydrate(self) -> Currency:
        """Charge la préférence stockée (ignorée si inconnue)."""
        if self.storage is None:
            return self.selected
        saved = get_currency(self.storage.get_item(PREFERENCE_KEY))
        if saved:
            self.selected = saved
        return self.selected

    def set_currency(self, code: str) -> Currency:
        currency = get_currency(code)
        if currency is None:
            raise ValueError(f"Unsupported currency: {code}")
        self.selected = currency
        if self.storage is not None:
            self.storage.set_item(PREFERENCE_KEY, currency.code)
        return currency

    def convert(self, amount: float) -> float:
        """Montant canonique -> devise choisie (multiplication pure, pas d'arrondi)."""
        return amount * self.selected.rate

    def convert_back(self, amount: float) -> float:
        """Inverse de convert: devise choisie -> montant canonique."""
        return amount / self.selected.rate

    def format(self, amount: float, currency_code: Optional[str] = None) -> str:
        """Ne lève jamais: une devise inconnue retombe sur la devise choisie."""
        currency = get_currency(currency_code) if currency_code else None
        return format_amount(amount, currency or self.selected)
