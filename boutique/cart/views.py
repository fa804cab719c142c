# module boutique.cart.views
"""Endpoints du panier (/api/cart).
- GET: lignes du propriétaire courant (utilisateur ou session invitée)
- POST: ajout / incrément; pose le cookie 'cart-session' pour un nouvel invité
- PUT: mise à jour de quantité (<= 0 supprime la ligne)
- DELETE: suppression d'une ligne (?itemId=) ou du panier entier (/all)
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from boutique.utils.errors import ValidationError
from boutique.utils.owner import OwnerContext, resolve_owner, read_owner, attach_session_cookie
from .models import AddToCartRequest, UpdateCartItemRequest
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cart", tags=["Cart API"])


@router.get("")
def get_cart(owner: OwnerContext = Depends(read_owner)):
    return {"items": service.get_cart(owner)}


@router.post("")
def add_to_cart(req: AddToCartRequest, owner: OwnerContext = Depends(resolve_owner)):
    item = service.add_item(owner, req.product_id, req.quantity)
    response = JSONResponse({"success": True, "item": item})
    attach_session_cookie(response, owner)
    return response


@router.put("")
def update_cart_item(req: UpdateCartItemRequest, owner: OwnerContext = Depends(read_owner)):
    service.set_quantity(owner, req.item_id, req.quantity)
    return {"success": True}


@router.delete("/all")
def clear_cart(owner: OwnerContext = Depends(read_owner)):
    service.clear_cart(owner)
    return {"success": True}


@router.delete("")
def remove_cart_item(itemId: Optional[str] = None, owner: OwnerContext = Depends(read_owner)):
    if not itemId:
        raise ValidationError("Item ID required")
    service.remove_item(owner, itemId)
    return {"success": True}
