"""
Identification de l'acheteur à partir du jeton Supabase.
Le jeton vient de l'en-tête Authorization (client API) ou du cookie sb_access (navigateur).
"""
from typing import Any, Dict, Optional
import logging
from fastapi import Request
from boutique.utils.errors import AuthenticationRequiredError

logger = logging.getLogger(__name__)

COOKIE_NAME = "sb_access"
SESSION_EXPIRED = "Session expired, please sign in again"

def extract_access_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(COOKIE_NAME) or None

def get_current_user(request: Request) -> Dict[str, Any]:
    """Dépendance stricte: AuthenticationRequiredError (401) sans jeton valide."""
    token = extract_access_token(request)
    if not token:
        raise AuthenticationRequiredError()

    from boutique.auth.service import get_user_from_token
    try:
        user = get_user_from_token(token)
    except Exception as e:
        logger.info("security: token rejected by supabase: %s", e)
        raise AuthenticationRequiredError(SESSION_EXPIRED, detail=str(e)) from e
    if not user.get("id"):
        raise AuthenticationRequiredError(SESSION_EXPIRED)
    return user

def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """
    Variante tolérante pour les parcours invités (panier, checkout):
    un jeton absent, expiré ou invalide donne None et le visiteur reste invité.
    """
    if not extract_access_token(request):
        return None
    try:
        return get_current_user(request)
    except AuthenticationRequiredError:
        return None
