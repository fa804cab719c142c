"""
Contexte propriétaire, résolu une seule fois par requête.
- Utilisateur authentifié: owner = user_id
- Invité: owner = session_id (cookie 'cart-session', UUID opaque), créé si absent
Le contexte est ensuite passé explicitement aux services (panier, commandes);
aucun service ne relit les cookies lui-même.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import Depends, Request
from fastapi.responses import Response

from boutique.config import COOKIE_SECURE
from boutique.utils.security import get_optional_user

CART_SESSION_COOKIE = "cart-session"
CART_SESSION_MAX_AGE = 60 * 60 * 24 * 30  # 30 jours


@dataclass(frozen=True)
class OwnerContext:
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    email: Optional[str] = None
    is_new_session: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def is_anonymous(self) -> bool:
        return not self.user_id and not self.session_id

    def filter(self) -> Dict[str, str]:
        """Colonne/valeur identifiant le propriétaire dans la table cart_items."""
        if self.user_id:
            return {"user_id": self.user_id}
        if self.session_id:
            return {"session_id": self.session_id}
        return {}


def build_owner(user: Optional[Dict[str, Any]], session_cookie: Optional[str], *, mint: bool) -> OwnerContext:
    if user and user.get("id"):
        return OwnerContext(user_id=str(user["id"]), email=user.get("email"))
    if session_cookie:
        return OwnerContext(session_id=session_cookie)
    if mint:
        return OwnerContext(session_id=str(uuid4()), is_new_session=True)
    return OwnerContext()


def resolve_owner(request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)) -> OwnerContext:
    """Dépendance FastAPI: génère une session invitée si nécessaire (écritures)."""
    return build_owner(user, request.cookies.get(CART_SESSION_COOKIE), mint=True)


def read_owner(request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)) -> OwnerContext:
    """Dépendance FastAPI: lecture seule, ne crée jamais de session invitée."""
    return build_owner(user, request.cookies.get(CART_SESSION_COOKIE), mint=False)


def attach_session_cookie(response: Response, owner: OwnerContext) -> None:
    # Cookie posé uniquement pour un invité dont la session vient d'être créée
    if owner.is_authenticated or not owner.is_new_session or not owner.session_id:
        return
    response.set_cookie(
        key=CART_SESSION_COOKIE,
        value=owner.session_id,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="Lax",
        max_age=CART_SESSION_MAX_AGE,
        path="/",
    )
