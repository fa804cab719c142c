from fastapi import APIRouter
from .converter import BASE_CURRENCY, SUPPORTED_CURRENCIES

router = APIRouter(prefix="/api/currencies", tags=["Currencies"])

@router.get("")
def list_currencies():
    """Devises supportées et taux statiques (relatifs à la devise canonique)."""
    return {
        "canonical": BASE_CURRENCY,
        "currencies": [
            {"code": c.code, "name": c.name, "symbol": c.symbol, "rate": c.rate}
            for c in SUPPORTED_CURRENCIES
        ],
    }
