"""
Wishlist locale (pas de synchronisation serveur), persistée en JSON sous la clé 'wishlist'.
"""
from dataclasses import dataclass, asdict
from typing import Callable, List, Optional
import json
import logging

from boutique.cart.store import log_notifier
from boutique.utils.local_storage import LocalStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "wishlist"


@dataclass(frozen=True)
class WishlistItem:
    id: str
    name: str
    brand: str
    price: float
    sale_price: Optional[float] = None
    image: str = ""


class WishlistStore:
    def __init__(self, storage: LocalStorage, notify: Callable[[str, str, str], None] = log_notifier):
        self.storage = storage
        self.notify = notify
        self._items: List[WishlistItem] = self._load()

    def _load(self) -> List[WishlistItem]:
        raw = self.storage.get_item(STORAGE_KEY)
        if not raw:
            return []
        try:
            return [WishlistItem(**entry) for entry in json.loads(raw)]
        except (ValueError, TypeError):
            logger.error("Failed to parse wishlist from local storage")
            return []

    def _save(self) -> None:
        self.storage.set_item(STORAGE_KEY, json.dumps([asdict(i) for i in self._items]))

    @property
    def items(self) -> List[WishlistItem]:
        return list(self._items)

    def contains(self, item_id: str) -> bool:
        return any(i.id == item_id for i in self._items)

    def add(self, item: WishlistItem) -> bool:
        if self.contains(item.id):
            return False
        self._items.append(item)
        self._save()
        self.notify("Added to Wishlist", f"{item.brand} {item.name} has been added to your wishlist.", "default")
        return True

    def remove(self, item_id: str) -> bool:
        item = next((i for i in self._items if i.id == item_id), None)
        if item is None:
            return False
        self._items = [i for i in self._items if i.id != item_id]
        self._save()
        self.notify("Removed from Wishlist", f"{item.brand} {item.name} has been removed from your wishlist.", "default")
        return True

    def clear(self) -> None:
        self._items = []
        self._save()
        self.notify("Wishlist Cleared", "All items have been removed from your wishlist.", "default")
