"""
Module 'cart': panier serveur (repository/service/views) et Cart Store client (store).
"""
from .store import CartItem, CartStore, CartBackend

__all__ = ["CartItem", "CartStore", "CartBackend"]
