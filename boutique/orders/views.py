# module boutique.orders.views
"""Endpoints des commandes (/api/orders).
- POST: création de commande depuis le checkout (invité ou utilisateur authentifié)
- GET: historique de l'utilisateur authentifié (401 sinon)
"""
import logging

from fastapi import APIRouter, Depends

from boutique.utils.owner import OwnerContext, read_owner
from boutique.utils.rate_limit import optional_rate_limit
from .models import CreateOrderRequest
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["Orders API"])


@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_order(req: CreateOrderRequest, owner: OwnerContext = Depends(read_owner)):
    order = service.create_order(req, owner)
    return {"success": True, "order": order}


@router.get("")
def list_orders(owner: OwnerContext = Depends(read_owner)):
    return {"orders": service.list_orders(owner)}
