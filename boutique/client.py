"""
Client HTTP de la boutique (httpx), côté « navigateur » / intégration.
- Implémente CartBackend pour CartStore au-dessus de /api/cart
- Soumission de commande et historique (/api/orders)
- Initiation des paiements (/api/create-payment-intent, /api/initialize-payment)
Le cookie 'cart-session' est conservé par le cookie jar du client httpx.
Les statuts d'erreur sont convertis en StorefrontError (ValidationError, NotFoundError...).
"""
from typing import Any, Dict, List, Optional
import logging

import httpx

from boutique.utils.errors import (
    AuthenticationRequiredError,
    NotFoundError,
    PersistenceError,
    StorefrontError,
    UpstreamGatewayError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_ERRORS_BY_STATUS = {
    400: ValidationError,
    401: AuthenticationRequiredError,
    404: NotFoundError,
    502: UpstreamGatewayError,
}


def _error_for(response: httpx.Response) -> StorefrontError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    message = None
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
    error_cls = _ERRORS_BY_STATUS.get(response.status_code)
    if error_cls is None:
        error_cls = PersistenceError if response.status_code >= 500 else StorefrontError
    err = error_cls(str(message) if message else None, detail=f"HTTP {response.status_code}")
    err.status_code = response.status_code
    return err


class StorefrontClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        # client: instance httpx existante (ex: fastapi.testclient.TestClient)
        self.http = client or httpx.Client(base_url=base_url, timeout=timeout)
        if access_token:
            self.http.headers["Authorization"] = f"Bearer {access_token}"

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("storefront %s %s failed: %s", method, path, e)
            raise UpstreamGatewayError("Store unavailable", detail=str(e)) from e
        if response.status_code >= 400:
            raise _error_for(response)
        if not response.content:
            return {}
        return response.json()

    # --- CartBackend ---

    def fetch_items(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/cart").get("items") or []

    def add_item(self, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        body = self._request("POST", "/api/cart", json={"productId": product_id, "quantity": quantity})
        return body.get("item") or {}

    def update_quantity(self, item_id: str, quantity: int) -> None:
        self._request("PUT", "/api/cart", json={"itemId": item_id, "quantity": quantity})

    def remove_item(self, item_id: str) -> None:
        # Ligne déjà absente côté serveur (ex: panier vidé par la commande): succès
        try:
            self._request("DELETE", "/api/cart", params={"itemId": item_id})
        except NotFoundError:
            logger.info("storefront remove_item: item %s already gone", item_id)

    def clear_cart(self) -> None:
        self._request("DELETE", "/api/cart/all")

    # --- commandes ---

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/orders", json=payload).get("order") or {}

    def list_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/orders").get("orders") or []

    # --- paiements ---

    def create_payment_intent(self, amount: float, currency: str = "usd", metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/create-payment-intent",
            json={"amount": amount, "currency": currency, "metadata": metadata or {}},
        )

    def initialize_payment(self, amount: float, email: str, currency: str = "ngn", metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/initialize-payment",
            json={"amount": amount, "email": email, "currency": currency, "metadata": metadata or {}},
        )
