"""
Component tests for the cart.

Requests go through the real router, service, repository and in-memory store; only the
principal comes from a development mock token.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from haatbazar.core.errors import ConcurrentModification, InternalError, InvalidQuantity
from haatbazar.main import create_app
from haatbazar.repositories.carts import CartRepository
from haatbazar.repositories.products import ProductRepository
from haatbazar.services.cart_service import CartService, validate_quantity
from haatbazar.store import MemoryStore

from .conftest import auth


def lines(body):
    return [(line["product_id"], line["quantity"]) for line in body["products"]]


class TestAddToCart:
    def test_first_add_creates_cart_with_default_quantity(self, test_client: TestClient, store, alice):
        response = test_client.post("/cart", json={"productId": "p-shoe"}, headers=alice)

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "alice"
        assert lines(data) == [("p-shoe", 1)]
        assert data["item_count"] == 1
        assert store.get("carts", "alice") is not None

    def test_adding_same_product_increments_single_line(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 2}, headers=alice)
        response = test_client.post("/cart", json={"productId": "p-shoe", "quantity": 3}, headers=alice)

        assert response.status_code == 200
        assert lines(response.json()) == [("p-shoe", 5)]

    def test_snake_case_product_id_is_accepted(self, test_client: TestClient, alice):
        response = test_client.post("/cart", json={"product_id": "p-kettle", "quantity": 1}, headers=alice)

        assert response.status_code == 200
        assert lines(response.json()) == [("p-kettle", 1)]

    def test_carts_are_per_user(self, test_client: TestClient, alice, bob):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 2}, headers=alice)
        response = test_client.post("/cart", json={"productId": "p-shoe", "quantity": 1}, headers=bob)

        assert lines(response.json()) == [("p-shoe", 1)]


class TestCartScenario:
    """empty -> {p1, 2} -> {p1, 5} -> {p1, 5} + {p2, 1}"""

    def test_increment_then_insert(self, test_client: TestClient, store, alice):
        for pid in ("p1", "p2"):
            store.insert(
                "products",
                {"name": pid, "description": "scenario item", "price": 1.0, "category": "misc"},
                doc_id=pid,
            )

        first = test_client.post("/cart", json={"productId": "p1", "quantity": 2}, headers=alice)
        assert lines(first.json()) == [("p1", 2)]

        second = test_client.post("/cart", json={"productId": "p1", "quantity": 3}, headers=alice)
        assert lines(second.json()) == [("p1", 5)]

        third = test_client.post("/cart", json={"productId": "p2", "quantity": 1}, headers=alice)
        assert lines(third.json()) == [("p1", 5), ("p2", 1)]
        assert third.json()["item_count"] == 2


class TestQuantityValidation:
    @pytest.mark.parametrize("quantity", [0, -1, -10])
    def test_non_positive_quantity_is_rejected_without_mutation(self, test_client: TestClient, store, alice, quantity):
        response = test_client.post("/cart", json={"productId": "p-shoe", "quantity": quantity}, headers=alice)

        assert response.status_code == 400
        assert response.json()["detail"] == InvalidQuantity.detail
        assert store.get("carts", "alice") is None

    def test_non_positive_quantity_does_not_touch_existing_line(self, test_client: TestClient, store, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 2}, headers=alice)
        before = store.get("carts", "alice")

        response = test_client.post("/cart", json={"productId": "p-shoe", "quantity": 0}, headers=alice)

        assert response.status_code == 400
        assert store.get("carts", "alice") == before

    @pytest.mark.parametrize("quantity", [True, False, "2", "lots", 2.5])
    def test_non_integer_quantity_is_a_bad_request(self, test_client: TestClient, store, alice, quantity):
        response = test_client.post("/cart", json={"productId": "p-shoe", "quantity": quantity}, headers=alice)

        assert response.status_code == 400
        assert store.get("carts", "alice") is None

    def test_boolean_quantity_cannot_update_a_line(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 3}, headers=alice)

        response = test_client.patch("/cart/items/p-shoe", json={"quantity": True}, headers=alice)

        assert response.status_code == 400
        assert test_client.get("/cart", headers=alice).json()["items"][0]["quantity"] == 3

    def test_missing_product_id_is_a_bad_request(self, test_client: TestClient, alice):
        response = test_client.post("/cart", json={"quantity": 1}, headers=alice)

        assert response.status_code == 400

    def test_validate_quantity_rules(self):
        assert validate_quantity(None) == 1
        assert validate_quantity(4) == 4
        for bad in (0, -3, True, 1.5, "2"):
            with pytest.raises(InvalidQuantity):
                validate_quantity(bad)
        with pytest.raises(InvalidQuantity):
            validate_quantity(None, default=None)


class TestProductExistence:
    """Whether a cart line may reference an unknown product is a deployment choice."""

    def test_unknown_product_is_rejected_by_default(self, test_client: TestClient, store, alice):
        response = test_client.post("/cart", json={"productId": "ghost", "quantity": 1}, headers=alice)

        assert response.status_code == 404
        assert store.get("carts", "alice") is None

    def test_unknown_product_is_accepted_when_verification_is_off(self, settings, store, alice):
        settings.verify_product_exists = False
        with TestClient(create_app(settings=settings, store=store)) as client:
            response = client.post("/cart", json={"productId": "ghost", "quantity": 1}, headers=alice)

        assert response.status_code == 200
        assert lines(response.json()) == [("ghost", 1)]


class TestConcurrentAdds:
    def test_parallel_adds_collapse_into_one_line(self, store):
        service = CartService(CartRepository(store), ProductRepository(store))
        n = 50

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: service.add_to_cart("alice", "p-shoe", 1), range(n)))

        assert lines(service.carts.get("alice")) == [("p-shoe", n)]

    def test_parallel_adds_of_mixed_products_keep_lines_unique(self, store):
        service = CartService(CartRepository(store), ProductRepository(store))
        products = ["p-shoe", "p-sock", "p-kettle"] * 20

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda pid: service.add_to_cart("alice", pid, 2), products))

        cart = dict(lines(service.carts.get("alice")))
        assert len(cart) == 3
        assert cart == {"p-shoe": 40, "p-sock": 40, "p-kettle": 40}


class ConflictingStore(MemoryStore):
    """Reports a concurrent modification for the first `conflicts` cart updates."""

    def __init__(self, conflicts: int):
        super().__init__()
        self.conflicts = conflicts
        self.calls = 0

    def update_one(self, collection, doc_id, mutate, upsert=True):
        self.calls += 1
        if self.calls <= self.conflicts:
            raise ConcurrentModification()
        return super().update_one(collection, doc_id, mutate, upsert=upsert)


class TestConflictRetry:
    def test_conflict_is_retried_transparently(self):
        store = ConflictingStore(conflicts=2)
        repo = CartRepository(store, max_retries=3)

        cart = repo.add_or_increment("alice", "p-shoe", 2)

        assert store.calls == 3
        assert lines(cart) == [("p-shoe", 2)]

    def test_exhausted_retries_surface_as_internal_error(self):
        store = ConflictingStore(conflicts=10)
        repo = CartRepository(store, max_retries=3)

        with pytest.raises(InternalError) as excinfo:
            repo.add_or_increment("alice", "p-shoe", 1)

        assert store.calls == 3
        assert isinstance(excinfo.value.__cause__, ConcurrentModification)

    def test_exhausted_retries_return_generic_500(self, settings):
        store = ConflictingStore(conflicts=10)
        store.insert("products", {"name": "Shoe", "description": "x", "price": 1.0, "category": "c"}, doc_id="p-shoe")

        with TestClient(create_app(settings=settings, store=store)) as client:
            response = client.post("/cart", json={"productId": "p-shoe"}, headers=auth("alice"))

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}


class TestCartLines:
    def test_get_cart_joins_catalog(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 2}, headers=alice)
        test_client.post("/cart", json={"productId": "p-kettle", "quantity": 1}, headers=alice)

        response = test_client.get("/cart", headers=alice)

        assert response.status_code == 200
        data = response.json()
        assert [item["name"] for item in data["items"]] == ["Trail Running Shoe", "Copper Kettle"]
        assert data["items"][0]["subtotal"] == 179.98
        assert data["total"] == 224.98
        assert data["item_count"] == 2

    def test_get_cart_for_new_user_is_empty(self, test_client: TestClient, alice):
        response = test_client.get("/cart", headers=alice)

        assert response.status_code == 200
        assert response.json() == {"user_id": "alice", "items": [], "item_count": 0, "total": 0.0}

    def test_get_cart_skips_deleted_products(self, test_client: TestClient, store, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 1}, headers=alice)
        test_client.post("/cart", json={"productId": "p-sock", "quantity": 1}, headers=alice)
        store.delete("products", "p-sock")

        data = test_client.get("/cart", headers=alice).json()

        assert [item["product_id"] for item in data["items"]] == ["p-shoe"]

    def test_update_quantity_sets_line(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 2}, headers=alice)

        response = test_client.patch("/cart/items/p-shoe", json={"quantity": 7}, headers=alice)

        assert response.status_code == 200
        assert lines(response.json()) == [("p-shoe", 7)]

    def test_update_quantity_rejects_zero(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe", "quantity": 2}, headers=alice)

        response = test_client.patch("/cart/items/p-shoe", json={"quantity": 0}, headers=alice)

        assert response.status_code == 400

    def test_update_missing_line_is_404(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe"}, headers=alice)

        assert test_client.patch("/cart/items/p-sock", json={"quantity": 1}, headers=alice).status_code == 404
        assert test_client.patch("/cart/items/p-sock", json={"quantity": 1}, headers=auth("carol")).status_code == 404

    def test_remove_line(self, test_client: TestClient, alice):
        test_client.post("/cart", json={"productId": "p-shoe"}, headers=alice)
        test_client.post("/cart", json={"productId": "p-sock"}, headers=alice)

        response = test_client.delete("/cart/items/p-shoe", headers=alice)

        assert response.status_code == 200
        assert lines(response.json()) == [("p-sock", 1)]
        assert test_client.delete("/cart/items/p-shoe", headers=alice).status_code == 404

    def test_clear_cart_is_idempotent(self, test_client: TestClient, store, alice):
        test_client.post("/cart", json={"productId": "p-shoe"}, headers=alice)

        assert test_client.delete("/cart", headers=alice).status_code == 204
        assert store.get("carts", "alice") is None
        assert test_client.delete("/cart", headers=alice).status_code == 204


class TestCartAuth:
    def test_missing_token_is_401(self, test_client: TestClient):
        response = test_client.post("/cart", json={"productId": "p-shoe"})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
