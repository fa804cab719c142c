import logging
from typing import Optional, Dict, Any
from boutique.config import SIGNUP_REDIRECT_URL
from boutique.utils.errors import AccountCreationError
from .repository import (
    auth_sign_up_account as sign_up_account,
    get_user_from_access_token as _repo_get_user_from_token,
)

logger = logging.getLogger(__name__)

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise user issu de supabase.auth.get_user(access_token):
    - Retourne {id, email, metadata, token}
    """
    raw = _repo_get_user_from_token(access_token)
    return {
        "id": raw.get("id"),
        "email": raw.get("email"),
        "metadata": raw.get("user_metadata") or {},
        "token": access_token,
    }

def create_account(email: str, password: str, full_name: Optional[str] = None) -> str:
    """Création de compte à la volée pendant le checkout.
    - Délègue à supabase.auth.sign_up (confirmation par email via SIGNUP_REDIRECT_URL)
    - Retourne l'id du nouvel utilisateur
    - Lève AccountCreationError sur toute erreur ou si aucun id n'est renvoyé:
      la commande ne doit pas être créée sans le compte demandé
    """
    email = (email or "").strip()
    options_data = {"full_name": full_name.strip()} if full_name else None
    try:
        res = sign_up_account(
            email=email,
            password=password,
            options_data=options_data,
            email_redirect_to=SIGNUP_REDIRECT_URL,
        )
    except Exception as e:
        logger.exception("auth.create_account failed email=%s", email)
        raise AccountCreationError(detail=str(e)) from e

    user = getattr(res, "user", None)
    user_id = getattr(user, "id", None) if user is not None else None
    if not user_id:
        logger.error("auth.create_account: aucun utilisateur renvoyé email=%s", email)
        raise AccountCreationError(detail="sign_up returned no user")
    return str(user_id)
