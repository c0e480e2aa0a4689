"""
Catalog listing and search, public and admin.
"""
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from haatbazar.repositories.products import ProductRepository
from haatbazar.services.catalog_service import CatalogService


class TestSearch:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_returns_empty_without_store_call(self, store, query):
        service = CatalogService(ProductRepository(store))

        with mock.patch.object(store, "scan") as scan, mock.patch.object(store, "find") as find:
            assert service.search(query) == []

        scan.assert_not_called()
        find.assert_not_called()

    def test_missing_query_parameter_returns_empty(self, test_client: TestClient):
        response = test_client.get("/search")

        assert response.status_code == 200
        assert response.json() == {"results": []}

    def test_uppercase_query_matches_lowercase_name(self, test_client: TestClient, store):
        store.insert("products", {"name": "running shoe", "description": "", "price": 50, "category": "x"}, doc_id="p1")

        response = test_client.get("/search", params={"q": "SHOE"})

        assert response.status_code == 200
        ids = [row["id"] for row in response.json()["results"]]
        assert "p1" in ids
        assert "p-shoe" in ids

    def test_description_is_searched(self, test_client: TestClient):
        response = test_client.get("/search", params={"q": "hand-hammered"})

        assert [row["id"] for row in response.json()["results"]] == ["p-kettle"]

    def test_query_is_trimmed(self, test_client: TestClient):
        response = test_client.get("/search", params={"q": "  kettle  "})

        assert [row["id"] for row in response.json()["results"]] == ["p-kettle"]

    def test_no_match(self, test_client: TestClient):
        assert test_client.get("/search", params={"q": "bicycle"}).json() == {"results": []}

    def test_results_are_capped_at_ten(self, test_client: TestClient, store):
        for i in range(15):
            store.insert("products", {"name": f"Lamp {i}", "description": "brass lamp", "price": 5, "category": "home"})

        results = test_client.get("/search", params={"q": "lamp"}).json()["results"]

        assert len(results) == 10

    def test_search_stops_scanning_once_capped(self, store):
        for i in range(30):
            store.insert("products", {"name": f"Lamp {i}", "description": "", "price": 5, "category": "home"})
        seen = []

        def tracking_scan(collection, filters=()):
            for doc in type(store).scan(store, collection, filters):
                seen.append(doc["id"])
                yield doc

        service = CatalogService(ProductRepository(store), search_limit=3)
        with mock.patch.object(store, "scan", side_effect=tracking_scan):
            results = service.search("lamp")

        assert len(results) == 3
        assert len(seen) < 33


class TestProducts:
    def test_list_products_newest_first(self, test_client: TestClient):
        response = test_client.get("/products")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == ["p-kettle", "p-sock", "p-shoe"]

    def test_list_by_category(self, test_client: TestClient):
        response = test_client.get("/products", params={"category": "kitchen"})

        assert [p["id"] for p in response.json()] == ["p-kettle"]

    def test_get_product(self, test_client: TestClient):
        response = test_client.get("/products/p-shoe")

        assert response.status_code == 200
        assert response.json()["name"] == "Trail Running Shoe"

    def test_get_unknown_product_is_404(self, test_client: TestClient):
        response = test_client.get("/products/nope")

        assert response.status_code == 404
        assert response.json() == {"detail": "Product not found"}


class TestAdminProducts:
    payload = {
        "name": "Prayer Flags",
        "description": "Cotton prayer flags",
        "price": 12.0,
        "category": "decor",
        "count_in_stock": 100,
    }

    def test_regular_user_cannot_create(self, test_client: TestClient, alice):
        response = test_client.post("/admin/products", json=self.payload, headers=alice)

        assert response.status_code == 403

    def test_create_update_delete(self, test_client: TestClient, as_admin):
        created = test_client.post("/admin/products", json=self.payload)
        assert created.status_code == 201
        product = created.json()
        assert product["rating"] == 0.0
        assert product["num_reviews"] == 0

        updated = test_client.patch(f"/admin/products/{product['id']}", json={"price": 15.5})
        assert updated.status_code == 200
        assert updated.json()["price"] == 15.5
        assert updated.json()["name"] == "Prayer Flags"

        assert test_client.delete(f"/admin/products/{product['id']}").status_code == 204
        assert test_client.get(f"/products/{product['id']}").status_code == 404

    def test_update_unknown_product_is_404(self, test_client: TestClient, as_admin):
        assert test_client.patch("/admin/products/nope", json={"price": 1}).status_code == 404

    def test_delete_unknown_product_is_404(self, test_client: TestClient, as_admin):
        assert test_client.delete("/admin/products/nope").status_code == 404

    def test_negative_price_is_rejected(self, test_client: TestClient, as_admin):
        response = test_client.post("/admin/products", json={**self.payload, "price": -1})

        assert response.status_code == 400

    def test_bulk_stock_update(self, test_client: TestClient, store, as_admin):
        response = test_client.put(
            "/admin/products/stock",
            json=[{"id": "p-shoe", "count_in_stock": 0}, {"id": "ghost", "count_in_stock": 5}],
        )

        assert response.status_code == 200
        assert response.json() == {"updated": 1, "not_found": 1}
        assert store.get("products", "p-shoe")["count_in_stock"] == 0
