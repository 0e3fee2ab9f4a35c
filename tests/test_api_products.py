"""Tests for the catalog HTTP API."""

from storefront.services import product_service

NEW_PRODUCT = {
    "name": "Jute Rug",
    "description": "Hand-woven jute rug, 160x230.",
    "price": 120.0,
    "category": "rugs",
    "stock_quantity": 4,
}


class TestBrowse:
    def test_list_with_pagination(self, client, make_product):
        for i in range(5):
            make_product(name=f"Candle {i}", category="fragrances")

        response = client.get("/api/products?limit=2&page=2")
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {
            "current_page": 2,
            "total_pages": 3,
            "total": 5,
            "has_next": True,
            "has_prev": True,
        }

    def test_filters(self, client, make_product):
        make_product(name="Oak Lamp", category="lighting", price=80.0)
        make_product(name="Paper Lamp", category="lighting", price=20.0, stock_quantity=0)
        make_product(name="Fern", category="plants", price=15.0)

        lighting = client.get("/api/products?category=lighting").json()["data"]
        assert {p["name"] for p in lighting} == {"Oak Lamp", "Paper Lamp"}

        in_stock = client.get("/api/products?category=lighting&in_stock=true").json()["data"]
        assert [p["name"] for p in in_stock] == ["Oak Lamp"]

        cheap = client.get("/api/products?max_price=25").json()["data"]
        assert {p["name"] for p in cheap} == {"Paper Lamp", "Fern"}

        found = client.get("/api/products?search=LAMP").json()["data"]
        assert len(found) == 2

    def test_sort_by_price(self, client, make_product):
        make_product(name="Mid item", price=20.0)
        make_product(name="Low item", price=10.0)
        make_product(name="High item", price=30.0)

        data = client.get("/api/products?sort_by=price&order=asc").json()["data"]
        assert [p["price"] for p in data] == [10.0, 20.0, 30.0]

    def test_unknown_sort_field(self, client):
        assert client.get("/api/products?sort_by=nonsense").status_code == 400

    def test_unknown_category(self, client):
        assert client.get("/api/products?category=cars").status_code == 400

    def test_featured_only_in_stock(self, client, make_product):
        make_product(name="Star item", featured=True)
        make_product(name="Sold out star", featured=True, stock_quantity=0)
        make_product(name="Plain item")

        data = client.get("/api/products/featured").json()["data"]
        assert [p["name"] for p in data] == ["Star item"]

    def test_categories(self, client, make_product):
        make_product(name="Rug one", category="rugs")
        make_product(name="Rug two", category="rugs", stock_quantity=0)
        make_product(name="Print", category="art")

        data = client.get("/api/products/categories").json()["data"]
        by_category = {c["category"]: c for c in data}
        assert by_category["rugs"]["count"] == 2
        assert by_category["rugs"]["in_stock_count"] == 1
        assert by_category["art"]["count"] == 1

    def test_get_missing(self, client):
        response = client.get("/api/products/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}


class TestManage:
    def test_create_requires_admin(self, client, customer_headers):
        assert client.post("/api/products", json=NEW_PRODUCT).status_code == 401
        response = client.post("/api/products", json=NEW_PRODUCT, headers=customer_headers)
        assert response.status_code == 403

    def test_create_derives_in_stock(self, client, admin_headers):
        response = client.post("/api/products", json=NEW_PRODUCT, headers=admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["in_stock"] is True

        empty = client.post(
            "/api/products",
            json={**NEW_PRODUCT, "name": "Empty Rug", "stock_quantity": 0},
            headers=admin_headers,
        ).json()["data"]
        assert empty["in_stock"] is False

    def test_in_stock_cannot_be_sent(self, client, admin_headers):
        response = client.post(
            "/api/products", json={**NEW_PRODUCT, "in_stock": True}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_update_stock_quantity_keeps_flag_in_sync(self, client, admin_headers, make_product):
        product = make_product(stock_quantity=3)
        response = client.put(
            f"/api/products/{product.id}",
            json={"stock_quantity": 0, "price": 9.5},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["in_stock"] is False
        assert data["price"] == 9.5

    def test_stock_adjustment(self, client, admin_headers, make_product):
        product = make_product(stock_quantity=0)
        url = f"/api/products/{product.id}/stock"

        added = client.post(url, json={"quantity": 5, "operation": "add"}, headers=admin_headers)
        assert added.json()["data"]["stock_quantity"] == 5
        assert added.json()["data"]["in_stock"] is True

        taken = client.post(
            url, json={"quantity": 50, "operation": "subtract"}, headers=admin_headers
        )
        assert taken.status_code == 200
        assert taken.json()["data"]["stock_quantity"] == 0
        assert taken.json()["data"]["in_stock"] is False

    def test_delete_removes_hosted_image(self, client, admin_headers, make_product, monkeypatch):
        deleted = []
        monkeypatch.setattr(product_service, "delete_from_storage", lambda path: deleted.append(path))

        product = make_product()
        client.put(
            f"/api/products/{product.id}",
            json={"image_public_id": "abc.png"},
            headers=admin_headers,
        )

        response = client.delete(f"/api/products/{product.id}", headers=admin_headers)
        assert response.status_code == 200
        assert deleted == ["products/abc.png"]
        assert client.get(f"/api/products/{product.id}").status_code == 404

    def test_delete_survives_storage_failure(self, client, admin_headers, make_product, monkeypatch):
        def boom(path):
            raise ConnectionError("storage down")

        monkeypatch.setattr(product_service, "delete_from_storage", boom)

        product = make_product()
        client.put(
            f"/api/products/{product.id}",
            json={"image_public_id": "abc.png"},
            headers=admin_headers,
        )
        assert client.delete(f"/api/products/{product.id}", headers=admin_headers).status_code == 200
