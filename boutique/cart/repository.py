"""
Accès aux données du panier (table 'cart_items').
Une ligne par (propriétaire, produit); le propriétaire est soit user_id soit session_id.
Les écritures échouées lèvent PersistenceError (la vue renvoie 500, le client se resynchronise).
"""
from typing import Any, Dict, List, Optional
import logging
import boutique.infra.supabase_client as supabase_client
from boutique.utils.errors import PersistenceError
from boutique.utils.owner import OwnerContext

logger = logging.getLogger(__name__)

CART_SELECT = "*, products(id, name, sku, price, sale_price, brands(name), product_images(url, alt_text, is_primary))"

def _scoped(query, owner: OwnerContext):
    for column, value in owner.filter().items():
        query = query.eq(column, value)
    return query

def list_items(owner: OwnerContext) -> List[Dict[str, Any]]:
    """Lignes brutes du panier du propriétaire (avec la jointure produit)."""
    if owner.is_anonymous:
        return []
    try:
        query = supabase_client.get_supabase().table("cart_items").select(CART_SELECT)
        res = _scoped(query, owner).execute()
        return res.data or []
    except Exception as e:
        logger.exception("cart.repository.list_items failed owner=%s", owner.filter())
        raise PersistenceError(detail=str(e)) from e

def find_item(owner: OwnerContext, product_id: str) -> Optional[Dict[str, Any]]:
    try:
        query = supabase_client.get_supabase().table("cart_items").select("*")
        res = _scoped(query, owner).eq("product_id", product_id).limit(1).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception as e:
        logger.exception("cart.repository.find_item failed product_id=%s", product_id)
        raise PersistenceError(detail=str(e)) from e

def insert_item(owner: OwnerContext, product_id: str, quantity: int) -> Dict[str, Any]:
    row = {
        "user_id": owner.user_id,
        "session_id": None if owner.user_id else owner.session_id,
        "product_id": product_id,
        "quantity": quantity,
    }
    try:
        res = supabase_client.get_supabase().table("cart_items").insert(row).execute()
        rows = res.data or []
        return rows[0] if rows else row
    except Exception as e:
        logger.exception("cart.repository.insert_item failed product_id=%s", product_id)
        raise PersistenceError(detail=str(e)) from e

def update_quantity(owner: OwnerContext, item_id: str, quantity: int) -> Optional[Dict[str, Any]]:
    """Met à jour la quantité d'une ligne du propriétaire; None si la ligne n'existe pas pour lui."""
    try:
        query = (
            supabase_client.get_supabase()
            .table("cart_items")
            .update({"quantity": quantity})
            .eq("id", item_id)
        )
        res = _scoped(query, owner).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception as e:
        logger.exception("cart.repository.update_quantity failed item_id=%s", item_id)
        raise PersistenceError(detail=str(e)) from e

def delete_item(owner: OwnerContext, item_id: str) -> bool:
    """Supprime une ligne du propriétaire; False si rien n'a été supprimé."""
    try:
        query = supabase_client.get_supabase().table("cart_items").delete().eq("id", item_id)
        res = _scoped(query, owner).execute()
        return bool(res.data)
    except Exception as e:
        logger.exception("cart.repository.delete_item failed item_id=%s", item_id)
        raise PersistenceError(detail=str(e)) from e

def delete_all(owner: OwnerContext) -> None:
    if owner.is_anonymous:
        return
    try:
        query = supabase_client.get_supabase().table("cart_items").delete()
        _scoped(query, owner).execute()
    except Exception as e:
        logger.exception("cart.repository.delete_all failed owner=%s", owner.filter())
        raise PersistenceError(detail=str(e)) from e

def delete_all_for_user(user_id: str) -> None:
    """Vidage côté serveur (service-role), utilisé après création d'une commande."""
    try:
        supabase_client.get_service_supabase().table("cart_items").delete().eq("user_id", user_id).execute()
    except Exception as e:
        logger.exception("cart.repository.delete_all_for_user failed user_id=%s", user_id)
        raise PersistenceError(detail=str(e)) from e
