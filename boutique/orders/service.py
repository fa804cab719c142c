"""Cas d'usage 'orders'.
Rôles:
- Créer une commande et ses lignes comme une seule unité (suppression compensatoire
  de la commande si l'insertion des lignes échoue).
- Créer le compte demandé au checkout avant la commande: sans compte, pas de commande.
- Vider le panier serveur du propriétaire authentifié uniquement (le panier invité,
  porté par le cookie 'cart-session', n'est pas vidé ici).
- Marquage optimiste processing/paid si ORDER_OPTIMISTIC_PAYMENT est actif; sinon
  la commande reste pending jusqu'au webhook de la passerelle.
"""
from typing import Any, Dict, List, Optional
import logging

from boutique.auth import service as auth_service
from boutique.cart import repository as cart_repository
from boutique.checkout.totals import totals_consistent
from boutique.config import ORDER_OPTIMISTIC_PAYMENT
from boutique.utils.errors import AuthenticationRequiredError, PersistenceError, ValidationError
from boutique.utils.owner import OwnerContext
from . import repository
from .models import CreateOrderRequest, OrderLine

logger = logging.getLogger(__name__)

def _validate(req: CreateOrderRequest) -> None:
    if not req.items:
        raise ValidationError("Order must contain at least one item")
    if not req.billing_address:
        raise ValidationError("Billing address required")
    if not totals_consistent(req.subtotal, req.tax_amount, req.shipping_amount, req.total_amount):
        raise ValidationError("Order totals are inconsistent")
    items_subtotal = sum(line.unit_price * line.quantity for line in req.items)
    if abs(items_subtotal - req.subtotal) > 0.01:
        raise ValidationError("Order subtotal does not match items")

def _resolve_user_id(req: CreateOrderRequest, owner: OwnerContext) -> Optional[str]:
    if owner.is_authenticated:
        return owner.user_id
    if not req.create_account:
        return None
    if not req.account_data or not req.account_data.password:
        raise ValidationError("Account details required")
    email = req.account_data.email or req.guest_email or ""
    # AccountCreationError se propage: aucune commande sans le compte demandé
    return auth_service.create_account(email, req.account_data.password, req.account_data.full_name)

def _order_row(req: CreateOrderRequest, user_id: Optional[str]) -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "guest_email": None if user_id else req.guest_email,
        "status": "pending",
        "payment_status": "pending",
        "subtotal_amount": req.subtotal,
        "tax_amount": req.tax_amount,
        "shipping_amount": req.shipping_amount,
        "total_amount": req.total_amount,
        "billing_address": req.billing_address,
        "shipping_address": req.shipping_address or req.billing_address,
        "payment_method": req.payment_method,
        "payment_reference": req.payment_reference,
    }

def _item_row(order_id: str, line: OrderLine) -> Dict[str, Any]:
    # Snapshot dénormalisé: l'historique ne dépend plus du catalogue
    return {
        "order_id": order_id,
        "product_id": line.id,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "total_price": round(line.unit_price * line.quantity, 2),
        "product_snapshot": {
            "name": line.name,
            "brand": line.brand,
            "image": line.image,
            "sku": line.sku,
        },
    }

def _insert_items_or_compensate(order_id: str, lines: List[OrderLine]) -> List[Dict[str, Any]]:
    try:
        return repository.insert_order_items([_item_row(order_id, line) for line in lines])
    except PersistenceError:
        try:
            repository.delete_order(order_id)
            logger.warning("orders.create_order compensated: order %s deleted", order_id)
        except PersistenceError:
            logger.error("orders.create_order compensation failed: order %s left without items", order_id)
        raise

def create_order(req: CreateOrderRequest, owner: OwnerContext) -> Dict[str, Any]:
    _validate(req)
    if not owner.is_authenticated and not (req.guest_email or "").strip():
        raise ValidationError("Email is required")

    user_id = _resolve_user_id(req, owner)
    order = repository.insert_order(_order_row(req, user_id))
    order_id = str(order.get("id"))
    items = _insert_items_or_compensate(order_id, req.items)
    logger.info("orders.create_order order_id=%s items=%s user_id=%s", order_id, len(items), user_id)

    if user_id:
        try:
            cart_repository.delete_all_for_user(user_id)
        except PersistenceError:
            logger.warning("orders.create_order: cart not cleared user_id=%s", user_id)

    if ORDER_OPTIMISTIC_PAYMENT:
        try:
            updated = repository.update_order_status(order_id, status="processing", payment_status="paid")
            order = updated or {**order, "status": "processing", "payment_status": "paid"}
            logger.info("orders.create_order optimistic processing/paid order_id=%s", order_id)
        except PersistenceError:
            logger.warning("orders.create_order: optimistic status not applied order_id=%s", order_id)

    return {**order, "order_items": items}

def list_orders(owner: OwnerContext) -> List[Dict[str, Any]]:
    """Commandes de l'utilisateur (lignes incluses), les plus récentes d'abord."""
    if not owner.is_authenticated:
        raise AuthenticationRequiredError()
    return repository.list_orders_for_user(str(owner.user_id))
