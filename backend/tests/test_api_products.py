from inventory_api.api.dependencies.services import get_product_service
from inventory_api.db.session import build_engine
from inventory_api.services.product_catalog import ProductCatalogService
from inventory_api.storage.document_store import DocumentStore

from conftest import product_payload


def _create(client, headers, **overrides):
    response = client.post("/products", json=product_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_get_product(client, auth_headers):
    created = _create(client, auth_headers)

    assert set(created) == {"id", "name", "description", "price", "stock", "category"}

    response = client.get(f"/products/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == created


def test_create_rejects_invalid_payload(client, auth_headers):
    for bad in (
        product_payload(price=0),
        product_payload(name="ab"),
        product_payload(description="too short"),
        product_payload(stock=10_001),
        product_payload(category="Groceries"),
    ):
        response = client.post("/products", json=bad, headers=auth_headers)
        assert response.status_code == 400, bad
        assert response.json()["message"] == "Validation failed"


def test_list_envelope_uses_camel_case(client, auth_headers):
    for i in range(3):
        _create(client, auth_headers, name=f"Speaker {i}")

    response = client.get("/products", params={"limit": 2}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 2
    assert body["totalPages"] == 2
    assert body["hasNextPage"] is True
    assert body["hasPreviousPage"] is False
    assert len(body["items"]) == 2
    assert all("nameSearch" not in item for item in body["items"])


def test_list_filters_and_sorting(client, auth_headers):
    _create(client, auth_headers, name="Wireless Mouse", price=2500)
    _create(client, auth_headers, name="Wireless Keyboard", price=4500)
    _create(client, auth_headers, name="Desk Lamp", price=3000, category="Furniture")

    response = client.get(
        "/products",
        params={
            "name": "WIRE",
            "category": "Electronics",
            "minPrice": 1000,
            "maxPrice": 5000,
            "sortBy": "price",
            "sortOrder": "desc",
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["items"]] == [
        "Wireless Keyboard",
        "Wireless Mouse",
    ]


def test_list_name_filter_does_not_match_inside_words(client, auth_headers):
    _create(client, auth_headers, name="Wireless Mouse")

    response = client.get("/products", params={"name": "mouse"}, headers=auth_headers)

    assert response.json()["items"] == []
    assert response.json()["total"] == 0


def test_list_rejects_bad_pagination(client, auth_headers):
    for params in ({"limit": 101}, {"page": 0}, {"limit": 0}):
        response = client.get("/products", params=params, headers=auth_headers)
        assert response.status_code == 400, params

    assert client.get("/products", params={"limit": 100}, headers=auth_headers).status_code == 200


def test_list_rejects_unknown_sort_field(client, auth_headers):
    response = client.get("/products", params={"sortBy": "description"}, headers=auth_headers)

    assert response.status_code == 400


def test_patch_updates_only_given_fields(client, auth_headers):
    created = _create(client, auth_headers)

    response = client.patch(
        f"/products/{created['id']}", json={"stock": 7}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {**created, "stock": 7}
    assert client.get(f"/products/{created['id']}", headers=auth_headers).json() == {
        **created,
        "stock": 7,
    }


def test_patch_validates_fields(client, auth_headers):
    created = _create(client, auth_headers)

    response = client.patch(
        f"/products/{created['id']}", json={"price": -5}, headers=auth_headers
    )

    assert response.status_code == 400


def test_delete_product(client, auth_headers):
    created = _create(client, auth_headers)

    response = client.delete(f"/products/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"id": created["id"], "deleted": True}
    missing = client.get(f"/products/{created['id']}", headers=auth_headers)
    assert missing.status_code == 404


def test_missing_product_is_404_everywhere(client, auth_headers):
    get = client.get("/products/nope", headers=auth_headers)
    patch = client.patch("/products/nope", json={"price": 10}, headers=auth_headers)
    delete = client.delete("/products/nope", headers=auth_headers)

    for response in (get, patch, delete):
        assert response.status_code == 404
        body = response.json()
        assert body["statusCode"] == 404
        assert body["message"] == "Product with ID nope not found"
        assert body["path"] == "/products/nope"


def test_store_failure_is_a_generic_500(app, client, auth_headers):
    # Fresh engine without the documents table: every query fails in the driver.
    broken_engine = build_engine("sqlite://")
    app.dependency_overrides[get_product_service] = lambda: ProductCatalogService(
        DocumentStore(broken_engine)
    )
    try:
        response = client.get("/products", headers=auth_headers)
    finally:
        app.dependency_overrides.clear()
        broken_engine.dispose()

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"
    assert "no such table" not in response.text
