"""
Cas d'usage 'cart' côté serveur: orchestre catalog + repository pour un propriétaire donné.
Le propriétaire (OwnerContext) est résolu par la vue et passé explicitement.
Concurrence: « last write wins » au niveau de la base, pas de jeton de version.
"""
from typing import Any, Dict, List
import logging

from boutique.catalog import repository as catalog
from boutique.catalog.repository import normalize_product
from boutique.utils.errors import NotFoundError, ValidationError
from boutique.utils.owner import OwnerContext
from . import repository

logger = logging.getLogger(__name__)

def _line_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    product = normalize_product(row.get("products") or {"id": row.get("product_id")})
    return {
        "id": str(row.get("id") or ""),
        "product_id": str(row.get("product_id") or product["id"]),
        "quantity": int(row.get("quantity") or 0),
        "name": product["name"],
        "brand": product["brand"],
        "price": product["price"],
        "sale_price": product["sale_price"],
        "image": product["image"],
        "sku": product["sku"],
    }

def get_cart(owner: OwnerContext) -> List[Dict[str, Any]]:
    """Lignes normalisées du panier; [] pour un visiteur sans session."""
    return [_line_from_row(r) for r in repository.list_items(owner)]

def add_item(owner: OwnerContext, product_id: str, quantity: int = 1) -> Dict[str, Any]:
    """
    Ajoute un produit ou incrémente la ligne existante (unicité par produit et propriétaire).
    - ValidationError si quantity <= 0 ou product_id vide
    - NotFoundError si le produit n'existe pas au catalogue
    """
    product_id = str(product_id or "").strip()
    if not product_id:
        raise ValidationError("Product ID required")
    if quantity <= 0:
        raise ValidationError("Quantity must be at least 1")
    if not catalog.get_product(product_id):
        raise NotFoundError("Product not found")

    existing = repository.find_item(owner, product_id)
    if existing:
        new_quantity = int(existing.get("quantity") or 0) + quantity
        logger.info("cart.add_item increment product_id=%s quantity=%s", product_id, new_quantity)
        row = repository.update_quantity(owner, str(existing["id"]), new_quantity)
        return row or {**existing, "quantity": new_quantity}

    logger.info("cart.add_item insert product_id=%s quantity=%s", product_id, quantity)
    return repository.insert_item(owner, product_id, quantity)

def set_quantity(owner: OwnerContext, item_id: str, quantity: int) -> None:
    """quantity <= 0 équivaut à remove_item."""
    if quantity <= 0:
        remove_item(owner, item_id)
        return
    if not repository.update_quantity(owner, item_id, quantity):
        raise NotFoundError("Cart item not found")

def remove_item(owner: OwnerContext, item_id: str) -> None:
    if not item_id:
        raise ValidationError("Item ID required")
    if not repository.delete_item(owner, item_id):
        raise NotFoundError("Cart item not found")

def clear_cart(owner: OwnerContext) -> None:
    repository.delete_all(owner)
