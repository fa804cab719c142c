"""
Accès aux données des commandes (tables 'orders' et 'order_items').
Écritures via le client service-role: un invité n'a pas de session Supabase.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List
import logging
import boutique.infra.supabase_client as supabase_client
from boutique.utils.errors import PersistenceError
from .models import ORDER_STATUSES, PAYMENT_STATUSES

logger = logging.getLogger(__name__)

ORDERS_SELECT = (
    "*, order_items(*, products(id, name, sku, brands(name), product_images(url, alt_text, is_primary)))"
)

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def insert_order(row: Dict[str, Any]) -> Dict[str, Any]:
    try:
        res = supabase_client.get_service_supabase().table("orders").insert(row).execute()
    except Exception as e:
        logger.exception("orders.repository.insert_order failed")
        raise PersistenceError("Failed to create order", detail=str(e)) from e
    rows = res.data or []
    if not rows:
        raise PersistenceError("Failed to create order", detail="insert returned no row")
    return rows[0]

def insert_order_items(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not rows:
        return []
    try:
        res = supabase_client.get_service_supabase().table("order_items").insert(rows).execute()
        return res.data or []
    except Exception as e:
        logger.exception("orders.repository.insert_order_items failed order_id=%s", rows[0].get("order_id"))
        raise PersistenceError("Failed to create order items", detail=str(e)) from e

def delete_order(order_id: str) -> None:
    """Action compensatoire: supprime une commande dont les lignes n'ont pas pu être créées."""
    try:
        supabase_client.get_service_supabase().table("orders").delete().eq("id", order_id).execute()
    except Exception as e:
        logger.exception("orders.repository.delete_order failed order_id=%s", order_id)
        raise PersistenceError(detail=str(e)) from e

def update_order_status(order_id: str, *, status: str, payment_status: str) -> Dict[str, Any]:
    """« set to X » idempotent; retourne la ligne mise à jour ({} si aucune)."""
    if status not in ORDER_STATUSES or payment_status not in PAYMENT_STATUSES:
        raise ValueError(f"Unknown order status: {status}/{payment_status}")
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .update({"status": status, "payment_status": payment_status, "updated_at": _now()})
            .eq("id", order_id)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.update_order_status failed order_id=%s", order_id)
        raise PersistenceError(detail=str(e)) from e
    rows = res.data or []
    return rows[0] if rows else {}

def list_orders_for_user(user_id: str) -> List[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDERS_SELECT)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("orders.repository.list_orders_for_user failed user_id=%s", user_id)
        raise PersistenceError("Failed to fetch orders", detail=str(e)) from e
