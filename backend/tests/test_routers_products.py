"""
test_routers_products.py: Tests for the /products endpoints.

Covers create (validation, coercion), get by id, listing with pagination
and name search.
"""

from app import models


class TestCreateProduct:
    def test_create_and_read_back(self, client):
        resp = client.post("/products", json={"name": "Widget", "price": 9.99})
        assert resp.status_code == 201
        assert resp.json() == {"id": 1, "name": "Widget", "price": 9.99, "storage": None}

        resp = client.get("/products/1")
        assert resp.status_code == 200
        assert resp.json() == {"id": 1, "name": "Widget", "price": 9.99, "storage": None}

    def test_text_numbers_are_coerced(self, client):
        resp = client.post("/products", json={"name": "Gadget", "price": "4.50", "storage": "12"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["price"] == 4.5
        assert data["storage"] == 12

    def test_name_is_trimmed(self, client):
        resp = client.post("/products", json={"name": "  Gizmo ", "price": 1})
        assert resp.json()["name"] == "Gizmo"

    def test_ids_increase(self, client):
        first = client.post("/products", json={"name": "A", "price": 1}).json()
        second = client.post("/products", json={"name": "B", "price": 2}).json()
        assert second["id"] > first["id"]

    def test_invalid_payloads_rejected_without_insert(self, client, db_session):
        bad = [
            {"name": "", "price": 1},
            {"name": "Widget", "price": -1},
            {"name": "Widget", "price": 1, "storage": 1.5},
            {"name": "Widget"},
        ]
        for payload in bad:
            resp = client.post("/products", json=payload)
            assert resp.status_code == 400, payload
            body = resp.json()
            assert body["error"] == "VALIDATION_ERROR"
            assert body["details"]
            assert {"field", "message"} <= set(body["details"][0])
        assert db_session.query(models.Product).count() == 0

    def test_oversized_storage_rejected(self, client, db_session):
        resp = client.post("/products", json={"name": "Big", "price": 1, "storage": 2**63})
        assert resp.status_code == 400
        assert [d["field"] for d in resp.json()["details"]] == ["storage"]
        assert db_session.query(models.Product).count() == 0

    def test_error_details_name_the_field(self, client):
        resp = client.post("/products", json={"name": "Widget", "price": -3})
        assert [d["field"] for d in resp.json()["details"]] == ["price"]

    def test_non_object_body(self, client):
        resp = client.post("/products", json=["Widget", 1])
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"

    def test_malformed_json(self, client):
        resp = client.post(
            "/products", content="{not json", headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"


class TestGetProduct:
    def test_existing(self, client, make_product):
        p = make_product(name="Bolt", price=0.25, storage=100)
        resp = client.get(f"/products/{p.id}")
        assert resp.status_code == 200
        assert resp.json() == {"id": p.id, "name": "Bolt", "price": 0.25, "storage": 100}

    def test_missing(self, client):
        resp = client.get("/products/999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Product not found"}

    def test_non_numeric_id(self, client):
        resp = client.get("/products/abc")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Product not found"}


class TestListProducts:
    def test_empty(self, client):
        resp = client.get("/products")
        assert resp.status_code == 200
        assert resp.json() == {"data": [], "page": 1, "limit": 10, "total": 0, "totalPages": 0}

    def test_newest_first(self, client, make_product):
        for name in ("A", "B", "C"):
            make_product(name=name)
        ids = [p["id"] for p in client.get("/products").json()["data"]]
        assert ids == sorted(ids, reverse=True)
        assert len(ids) == 3

    def test_pagination(self, client, make_product):
        for i in range(5):
            make_product(name=f"P{i}")
        body = client.get("/products", params={"page": 2, "limit": 2}).json()
        assert body["page"] == 2
        assert body["limit"] == 2
        assert body["total"] == 5
        assert body["totalPages"] == 3
        assert [p["name"] for p in body["data"]] == ["P2", "P1"]

    def test_page_past_end(self, client, make_product):
        make_product()
        body = client.get("/products", params={"page": 9}).json()
        assert body["data"] == []
        assert body["total"] == 1

    def test_limit_is_capped(self, client):
        assert client.get("/products", params={"limit": 1000}).json()["limit"] == 100

    def test_junk_params_fall_back(self, client):
        body = client.get("/products", params={"page": "x", "limit": "y"}).json()
        assert (body["page"], body["limit"]) == (1, 10)

    def test_search_is_case_insensitive_substring(self, client, make_product):
        make_product(name="Blue Widget")
        make_product(name="widget mini")
        make_product(name="Gadget")
        body = client.get("/products", params={"q": "WIDGET", "limit": 1}).json()
        assert body["total"] == 2
        assert body["totalPages"] == 2
        assert body["data"][0]["name"] == "widget mini"

    def test_search_treats_wildcards_literally(self, client, make_product):
        make_product(name="50% off")
        make_product(name="500 units")
        body = client.get("/products", params={"q": "0%"}).json()
        assert [p["name"] for p in body["data"]] == ["50% off"]

    def test_blank_search_means_no_filter(self, client, make_product):
        make_product(name="A")
        make_product(name="B")
        assert client.get("/products", params={"q": "   "}).json()["total"] == 2
