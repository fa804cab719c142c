from typing import Any, Dict
from boutique.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY, STRIPE_SECRET_KEY, PAYSTACK_SECRET_KEY

def health_config_info() -> Dict[str, Any]:
    """État de configuration (présence des clés, jamais leurs valeurs)."""
    return {
        "supabase": {
            "url": SUPABASE_URL or None,
            "anon_key": bool(SUPABASE_ANON),
            "service_key": bool(SUPABASE_SERVICE_KEY),
        },
        "gateways": {
            "stripe": bool(STRIPE_SECRET_KEY),
            "paystack": bool(PAYSTACK_SECRET_KEY),
        },
    }
