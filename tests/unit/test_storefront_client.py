import json

import httpx
import pytest

from boutique.client import StorefrontClient
from boutique.utils.errors import (
    AuthenticationRequiredError,
    NotFoundError,
    PersistenceError,
    UpstreamGatewayError,
    ValidationError,
)


def _client(handler, **kwargs):
    http = httpx.Client(base_url="http://shop.test", transport=httpx.MockTransport(handler))
    return StorefrontClient(client=http, **kwargs)


def test_cart_backend_calls():
    seen = []

    def handler(request: httpx.Request):
        seen.append((request.method, request.url.path, request.url.params.get("itemId"), request.content))
        if request.method == "GET":
            return httpx.Response(200, json={"items": [{"id": "ci-1", "product_id": "p1", "quantity": 2}]})
        if request.method == "POST":
            return httpx.Response(200, json={"success": True, "item": {"id": "ci-1"}})
        return httpx.Response(200, json={"success": True})

    sf = _client(handler)
    assert sf.fetch_items()[0]["quantity"] == 2
    assert sf.add_item("p1") == {"id": "ci-1"}
    sf.update_quantity("ci-1", 3)
    sf.remove_item("ci-1")

    assert seen[1][3] and json.loads(seen[1][3]) == {"productId": "p1", "quantity": 1}
    assert json.loads(seen[2][3]) == {"itemId": "ci-1", "quantity": 3}
    assert seen[3][:3] == ("DELETE", "/api/cart", "ci-1")


def test_bearer_token_header():
    captured = {}

    def handler(request):
        captured["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"orders": []})

    assert _client(handler, access_token="tok").list_orders() == []
    assert captured["auth"] == "Bearer tok"


@pytest.mark.parametrize("status,error_cls", [
    (400, ValidationError),
    (401, AuthenticationRequiredError),
    (404, NotFoundError),
    (500, PersistenceError),
    (502, UpstreamGatewayError),
])
def test_error_statuses_map_to_exceptions(status, error_cls):
    sf = _client(lambda request: httpx.Response(status, json={"error": "nope"}))
    with pytest.raises(error_cls) as exc:
        sf.create_order({})
    assert exc.value.message == "nope"
    assert exc.value.status_code == status


def test_remove_missing_item_is_not_an_error():
    sf = _client(lambda request: httpx.Response(404, json={"error": "Cart item not found"}))
    sf.remove_item("gone")


def test_network_failure_is_upstream_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamGatewayError):
        _client(handler).fetch_items()
