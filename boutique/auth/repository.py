"""Accès à Supabase Auth (client anon): inscription au checkout et lecture de l'acheteur."""
from typing import Any, Dict, Optional
from boutique.infra import supabase_client

def auth_sign_up_account(
    email: str,
    password: str,
    options_data: Optional[Dict[str, Any]] = None,
    email_redirect_to: Optional[str] = None,
):
    """supabase.auth.sign_up; options.data porte le full_name, l'email de confirmation
    renvoie vers email_redirect_to."""
    options: Dict[str, Any] = {}
    if options_data:
        options["data"] = options_data
    if email_redirect_to:
        options["email_redirect_to"] = email_redirect_to
    payload: Dict[str, Any] = {"email": email, "password": password}
    if options:
        payload["options"] = options
    return supabase_client.get_supabase().auth.sign_up(payload)

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    res = supabase_client.get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None)
    if user is None:
        return {}
    if isinstance(user, dict):
        return user
    return {
        "id": getattr(user, "id", None),
        "email": getattr(user, "email", None),
        "user_metadata": getattr(user, "user_metadata", None),
    }
