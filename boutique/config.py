# boutique.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe, Paystack), sécurité cookies, CORS/hosts
- Expose les paramètres de tarification du checkout (taxe, livraison) et la devise canonique
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env_flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

def _env_float(name: str, default: float) -> float:
    try:
        return float(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Supabase: URLs et clés (anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Cookies / sécurité
COOKIE_SECURE = _env_flag("COOKIE_SECURE")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# URL publique du site (redirection de confirmation lors d'une création de compte au checkout)
SITE_URL = _clean_env(os.getenv("SITE_URL") or "http://localhost:8000")
SIGNUP_REDIRECT_URL = _clean_env(os.getenv("SIGNUP_REDIRECT_URL") or f"{SITE_URL}/auth/callback")

# Passerelle A (Stripe): clé secrète et secret webhook
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")

# Passerelle B (Paystack): clé secrète, secret webhook (par défaut la clé secrète) et URL API
PAYSTACK_SECRET_KEY = _clean_env(os.getenv("PAYSTACK_SECRET_KEY") or "")
PAYSTACK_WEBHOOK_SECRET = _clean_env(os.getenv("PAYSTACK_WEBHOOK_SECRET") or PAYSTACK_SECRET_KEY)
PAYSTACK_BASE_URL = _clean_env(os.getenv("PAYSTACK_BASE_URL") or "https://api.paystack.co")
PAYSTACK_CHANNELS = [c.strip() for c in os.getenv("PAYSTACK_CHANNELS", "card,bank,ussd,bank_transfer").split(",") if c.strip()]

# Tag ajouté aux métadonnées de paiement pour identifier la boutique côté passerelle
PAYMENT_SOURCE_TAG = _clean_env(os.getenv("PAYMENT_SOURCE_TAG") or "lenox-luxury-watches")

# Devise de stockage des prix
CANONICAL_CURRENCY = _clean_env(os.getenv("CANONICAL_CURRENCY") or "USD").upper()

# Tarification checkout: taxe proportionnelle, livraison offerte au-delà d'un seuil
TAX_RATE = _env_float("TAX_RATE", 0.08)
FREE_SHIPPING_THRESHOLD = _env_float("FREE_SHIPPING_THRESHOLD", 1000.0)
FLAT_SHIPPING_AMOUNT = _env_float("FLAT_SHIPPING_AMOUNT", 50.0)

# Commande marquée processing/paid dès sa création (sans attendre la confirmation passerelle)
ORDER_OPTIMISTIC_PAYMENT = _env_flag("ORDER_OPTIMISTIC_PAYMENT", "true")

# Redirection HTTP -> HTTPS derrière un proxy (x-forwarded-proto)
FORCE_HTTPS = _env_flag("FORCE_HTTPS")
