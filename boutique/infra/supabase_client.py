"""
Clients Supabase de la boutique, créés à la première utilisation.
- get_supabase: clé anon (catalogue public, panier, auth des acheteurs)
- get_service_supabase: clé service-role (commandes, journal de paiement, webhooks);
  contourne la RLS, donc jamais exposée au navigateur
"""
from typing import Dict
import logging
from supabase import Client, create_client
from boutique.config import SUPABASE_ANON, SUPABASE_SERVICE_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)

_clients: Dict[str, Client] = {}

def _client(role: str, key: str) -> Client:
    if not SUPABASE_URL or not key:
        raise RuntimeError(f"Supabase {role} client not configured (SUPABASE_URL / key missing)")
    if role not in _clients:
        logger.info("supabase %s client created for %s", role, SUPABASE_URL)
        _clients[role] = create_client(SUPABASE_URL, key)
    return _clients[role]

def get_supabase() -> Client:
    return _client("anon", SUPABASE_ANON)

def get_service_supabase() -> Client:
    return _client("service", SUPABASE_SERVICE_KEY)
