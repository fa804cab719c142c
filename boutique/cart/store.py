"""
Cart Store « côté client »: état local du panier avec écriture immédiate vers un
collaborateur de persistance (API /api/cart via StorefrontClient, ou tout objet
respectant CartBackend).

Stratégie de cohérence:
- mise à jour locale optimiste, puis écriture distante
- en cas d'échec d'écriture: notification récupérable + refresh() qui remplace
  l'état local par l'état serveur (le cache local n'est jamais laissé divergent)
"""
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Protocol
import logging

logger = logging.getLogger(__name__)


class CartBackend(Protocol):
    def fetch_items(self) -> List[Dict[str, Any]]: ...
    def add_item(self, product_id: str, quantity: int = 1) -> Dict[str, Any]: ...
    def update_quantity(self, item_id: str, quantity: int) -> None: ...
    def remove_item(self, item_id: str) -> None: ...


@dataclass(frozen=True)
class CartItem:
    product_id: str
    name: str
    brand: str
    price: float
    quantity: int = 1
    sale_price: Optional[float] = None
    image: str = ""
    sku: str = ""
    item_id: Optional[str] = None  # id de la ligne côté serveur

    @property
    def unit_price(self) -> float:
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_line(cls, line: Dict[str, Any]) -> "CartItem":
        sale = line.get("sale_price")
        return cls(
            product_id=str(line.get("product_id") or ""),
            name=line.get("name") or "",
            brand=line.get("brand") or "",
            price=float(line.get("price") or 0),
            quantity=int(line.get("quantity") or 0),
            sale_price=float(sale) if sale is not None else None,
            image=line.get("image") or "",
            sku=line.get("sku") or "",
            item_id=str(line["id"]) if line.get("id") else None,
        )

    def to_order_line(self) -> Dict[str, Any]:
        return {
            "id": self.product_id,
            "name": self.name,
            "brand": self.brand,
            "price": self.price,
            "salePrice": self.sale_price,
            "image": self.image,
            "sku": self.sku,
            "quantity": self.quantity,
        }


Notifier = Callable[[str, str, str], None]


def log_notifier(title: str, description: str, variant: str = "default") -> None:
    if variant == "destructive":
        logger.warning("%s: %s", title, description)
    else:
        logger.info("%s: %s", title, description)


class CartStore:
    def __init__(self, backend: Optional[CartBackend] = None, notify: Notifier = log_notifier):
        self.backend = backend
        self.notify = notify
        self._items: List[CartItem] = []

    # --- état dérivé ---

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        return sum((i.line_total for i in self._items), 0.0)

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get(self, product_id: str) -> Optional[CartItem]:
        return next((i for i in self._items if i.product_id == product_id), None)

    # --- commandes ---

    def add(self, item: CartItem) -> None:
        """Ajoute une unité du produit (incrément si déjà présent)."""
        existing = self.get(item.product_id)
        if existing:
            updated = replace(existing, quantity=existing.quantity + 1)
            self._replace(updated)
        else:
            updated = replace(item, quantity=1)
            self._items.append(updated)
        self.notify("Added to Cart", f"{item.brand} {item.name} has been added to your cart.", "default")

        if self.backend is None:
            return
        try:
            row = self.backend.add_item(item.product_id, 1)
            server_id = (row or {}).get("id")
            if server_id and not updated.item_id:
                current = self.get(item.product_id)
                if current:
                    self._replace(replace(current, item_id=str(server_id)))
        except Exception:
            self._on_write_failure("add", item.product_id)

    def remove(self, product_id: str) -> None:
        existing = self.get(product_id)
        if not existing:
            return
        self._items = [i for i in self._items if i.product_id != product_id]
        self.notify("Removed from Cart", f"{existing.brand} {existing.name} has been removed from your cart.", "default")

        if self.backend is None or not existing.item_id:
            return
        try:
            self.backend.remove_item(existing.item_id)
        except Exception:
            self._on_write_failure("remove", product_id)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """quantity <= 0 équivaut à remove(product_id)."""
        if quantity <= 0:
            self.remove(product_id)
            return
        existing = self.get(product_id)
        if not existing:
            return
        self._replace(replace(existing, quantity=quantity))

        if self.backend is None or not existing.item_id:
            return
        try:
            self.backend.update_quantity(existing.item_id, quantity)
        except Exception:
            self._on_write_failure("set_quantity", product_id)

    def clear(self) -> None:
        """
        Vide le panier localement puis supprime chaque ligne distante (best-effort).
        Une suppression échouée n'annule pas les autres; l'état serveur est ensuite relu.
        """
        previous = self._items
        self._items = []
        self.notify("Cart Cleared", "All items have been removed from your cart.", "default")

        if self.backend is None:
            return
        failed = 0
        for item in previous:
            if not item.item_id:
                continue
            try:
                self.backend.remove_item(item.item_id)
            except Exception:
                failed += 1
                logger.exception("cart.store.clear: suppression échouée item_id=%s", item.item_id)
        if failed:
            self._on_write_failure("clear", f"{failed} item(s)")

    def refresh(self) -> None:
        """Remplace l'état local par l'état autoritaire du collaborateur de persistance."""
        if self.backend is None:
            return
        try:
            lines = self.backend.fetch_items()
        except Exception:
            logger.exception("cart.store.refresh failed")
            self.notify("Cart unavailable", "We could not load your cart. Please try again.", "destructive")
            return
        self._items = [CartItem.from_line(line) for line in lines if int(line.get("quantity") or 0) > 0]

    # --- interne ---

    def _replace(self, updated: CartItem) -> None:
        self._items = [updated if i.product_id == updated.product_id else i for i in self._items]

    def _on_write_failure(self, action: str, ref: str) -> None:
        logger.warning("cart.store.%s failed ref=%s", action, ref, exc_info=True)
        self.notify("Cart update failed", "Your cart could not be saved. It has been reloaded.", "destructive")
        self.refresh()
