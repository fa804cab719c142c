import os

os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import itertools
from typing import Any, Dict, Generator, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from boutique.app_setup.factory import create_app
from boutique.catalog.repository import normalize_product
from boutique.utils.errors import AccountCreationError, PersistenceError
from boutique.utils.owner import OwnerContext
from boutique.utils.security import get_optional_user

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return create_app()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def login(app):
    """Simule un utilisateur authentifié (Bearer/cookie) pour les dépendances propriétaire."""
    def _login(user_id: str = "user-1", email: str = "buyer@example.com") -> Dict[str, Any]:
        user = {"id": user_id, "email": email, "metadata": {}, "token": "fake-token"}
        app.dependency_overrides[get_optional_user] = lambda: user
        return user
    yield _login
    app.dependency_overrides.pop(get_optional_user, None)

# Aucun accès réseau à Supabase pendant les tests
@pytest.fixture(autouse=True)
def mock_supabase(monkeypatch):
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: MagicMock())


def product_row(pid: str, name: str, price: float, sale_price: Optional[float] = None, brand: str = "Rolex") -> Dict[str, Any]:
    """Ligne produit au format Supabase (jointures brands / product_images)."""
    return {
        "id": pid,
        "name": name,
        "sku": f"SKU-{pid}",
        "price": price,
        "sale_price": sale_price,
        "brands": {"name": brand},
        "product_images": [{"url": f"https://img.test/{pid}.jpg", "alt_text": name, "is_primary": True}],
    }


class FakeDB:
    """
    Persistance en mémoire substituée aux repositories (catalog, cart, orders, payments)
    et à la création de compte. Les drapeaux fail_* simulent des pannes ciblées.
    """

    def __init__(self):
        self.products: Dict[str, Dict[str, Any]] = {}
        self.cart_rows: List[Dict[str, Any]] = []
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.order_items: List[Dict[str, Any]] = []
        self.payment_intents: List[Dict[str, Any]] = []
        self.ledger: List[Dict[str, Any]] = []
        self.accounts: List[Dict[str, Any]] = []
        self.fail_order_items = False
        self.fail_account = False
        self.fail_ledger = False
        self._ids = itertools.count(1)

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def add_product(self, pid: str, name: str, price: float, sale_price: Optional[float] = None, brand: str = "Rolex") -> None:
        self.products[pid] = product_row(pid, name, price, sale_price, brand)

    # --- catalog ---

    def get_product(self, product_id: str):
        row = self.products.get(str(product_id))
        return normalize_product(row) if row else None

    # --- cart ---

    def _owned(self, owner: OwnerContext) -> List[Dict[str, Any]]:
        scope = owner.filter()
        if not scope:
            return []
        return [r for r in self.cart_rows if all(r.get(k) == v for k, v in scope.items())]

    def list_items(self, owner: OwnerContext):
        return [{**r, "products": self.products.get(r["product_id"])} for r in self._owned(owner)]

    def find_item(self, owner: OwnerContext, product_id: str):
        return next((dict(r) for r in self._owned(owner) if r["product_id"] == product_id), None)

    def insert_item(self, owner: OwnerContext, product_id: str, quantity: int):
        row = {
            "id": self.next_id("ci"),
            "user_id": owner.user_id,
            "session_id": None if owner.user_id else owner.session_id,
            "product_id": product_id,
            "quantity": quantity,
        }
        self.cart_rows.append(row)
        return dict(row)

    def update_quantity(self, owner: OwnerContext, item_id: str, quantity: int):
        for row in self._owned(owner):
            if row["id"] == item_id:
                row["quantity"] = quantity
                return dict(row)
        return None

    def delete_item(self, owner: OwnerContext, item_id: str) -> bool:
        before = len(self.cart_rows)
        owned_ids = {r["id"] for r in self._owned(owner)}
        self.cart_rows = [r for r in self.cart_rows if not (r["id"] == item_id and r["id"] in owned_ids)]
        return len(self.cart_rows) < before

    def delete_all(self, owner: OwnerContext) -> None:
        owned_ids = {r["id"] for r in self._owned(owner)}
        self.cart_rows = [r for r in self.cart_rows if r["id"] not in owned_ids]

    def delete_all_for_user(self, user_id: str) -> None:
        self.cart_rows = [r for r in self.cart_rows if r.get("user_id") != user_id]

    # --- orders ---

    def insert_order(self, row: Dict[str, Any]):
        order = {**row, "id": self.next_id("ord"), "created_at": f"2024-01-01T00:00:{len(self.orders):02d}Z"}
        self.orders[order["id"]] = order
        return dict(order)

    def insert_order_items(self, rows: List[Dict[str, Any]]):
        if self.fail_order_items:
            raise PersistenceError("Failed to create order items", detail="simulated")
        created = [{**r, "id": self.next_id("oi")} for r in rows]
        self.order_items.extend(created)
        return created

    def delete_order(self, order_id: str) -> None:
        self.orders.pop(order_id, None)

    def update_order_status(self, order_id: str, *, status: str, payment_status: str):
        order = self.orders.get(order_id)
        if not order:
            return {}
        order.update(status=status, payment_status=payment_status)
        return dict(order)

    def list_orders_for_user(self, user_id: str):
        rows = [
            {**o, "order_items": [i for i in self.order_items if i["order_id"] == o["id"]]}
            for o in self.orders.values()
            if o.get("user_id") == user_id
        ]
        return sorted(rows, key=lambda o: o["created_at"], reverse=True)

    # --- payments ---

    def log_payment_intent(self, **row):
        self.payment_intents.append(dict(row))
        return row

    def update_payment_intent_status(self, *, gateway: str, reference: str, status: str) -> int:
        touched = 0
        for pi in self.payment_intents:
            if pi["gateway"] == gateway and pi["reference"] == reference:
                pi["status"] = status
                touched += 1
        return touched

    def record_financial_transaction(self, row: Dict[str, Any]) -> bool:
        if self.fail_ledger:
            raise PersistenceError(detail="simulated")
        if any(e["event_key"] == row["event_key"] for e in self.ledger):
            return False
        self.ledger.append(dict(row))
        return True

    # --- auth ---

    def create_account(self, email: str, password: str, full_name: Optional[str] = None) -> str:
        if self.fail_account:
            raise AccountCreationError(detail="simulated")
        user_id = self.next_id("user")
        self.accounts.append({"id": user_id, "email": email, "full_name": full_name})
        return user_id


@pytest.fixture
def fake_db(monkeypatch) -> FakeDB:
    db = FakeDB()
    patches = {
        "boutique.catalog.repository.get_product": db.get_product,
        "boutique.cart.repository.list_items": db.list_items,
        "boutique.cart.repository.find_item": db.find_item,
        "boutique.cart.repository.insert_item": db.insert_item,
        "boutique.cart.repository.update_quantity": db.update_quantity,
        "boutique.cart.repository.delete_item": db.delete_item,
        "boutique.cart.repository.delete_all": db.delete_all,
        "boutique.cart.repository.delete_all_for_user": db.delete_all_for_user,
        "boutique.orders.repository.insert_order": db.insert_order,
        "boutique.orders.repository.insert_order_items": db.insert_order_items,
        "boutique.orders.repository.delete_order": db.delete_order,
        "boutique.orders.repository.update_order_status": db.update_order_status,
        "boutique.orders.repository.list_orders_for_user": db.list_orders_for_user,
        "boutique.payments.repository.log_payment_intent": db.log_payment_intent,
        "boutique.payments.repository.update_payment_intent_status": db.update_payment_intent_status,
        "boutique.payments.repository.record_financial_transaction": db.record_financial_transaction,
        "boutique.auth.service.create_account": db.create_account,
    }
    for target, fn in patches.items():
        monkeypatch.setattr(target, fn)
    return db
