"""
Accès en lecture au catalogue (table 'products' + jointures brands/product_images).
Sert à valider un produit avant ajout au panier et à hydrater les lignes de panier.
"""
from typing import Any, Dict, List, Optional
import logging
import boutique.infra.supabase_client as supabase_client
from boutique.utils.errors import PersistenceError

logger = logging.getLogger(__name__)

PRODUCT_SELECT = "id, name, sku, price, sale_price, brands(name), product_images(url, alt_text, is_primary)"

def _primary_image(images: Optional[List[Dict[str, Any]]]) -> str:
    images = images or []
    for img in images:
        if img.get("is_primary"):
            return img.get("url") or ""
    return (images[0].get("url") or "") if images else ""

def normalize_product(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Aplatit une ligne produit Supabase en {id, name, brand, price, sale_price, image, sku}.
    - sale_price vaut None si absent ou nul (pas de promotion)
    """
    brand = row.get("brands") or {}
    sale = row.get("sale_price")
    return {
        "id": str(row.get("id") or ""),
        "name": row.get("name") or "",
        "brand": (brand.get("name") or "") if isinstance(brand, dict) else "",
        "price": float(row.get("price") or 0),
        "sale_price": float(sale) if sale else None,
        "image": _primary_image(row.get("product_images")),
        "sku": row.get("sku") or "",
    }

def get_product(product_id: str) -> Optional[Dict[str, Any]]:
    """Retourne le produit normalisé, None s'il n'existe pas."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select(PRODUCT_SELECT)
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("catalog.repository.get_product failed product_id=%s", product_id)
        raise PersistenceError(detail=str(e)) from e
    rows = res.data or []
    return normalize_product(rows[0]) if rows else None
