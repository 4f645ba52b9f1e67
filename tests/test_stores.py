"""Tests for Store API endpoints."""


def test_create_store(client):
    """Test creating a new store."""
    response = client.post(
        "/api/v1/stores",
        json={"name": "Downtown", "address": "123 Main Street", "phone": "(212) 555-0100"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Downtown"
    assert data["address"] == "123 Main Street"
    assert data["phone"] == "(212) 555-0100"
    assert "id" in data
    assert "createdAt" in data
    assert "updatedAt" in data


def test_create_store_optional_fields(client):
    """Test address and phone are optional."""
    response = client.post("/api/v1/stores", json={"name": "Minimal"})

    assert response.status_code == 201
    data = response.json()
    assert data["address"] is None
    assert data["phone"] is None


def test_create_store_missing_name(client):
    """Test creating a store without a name fails with field details."""
    response = client.post("/api/v1/stores", json={"address": "Nowhere"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "name" in body["error"]["details"]


def test_create_store_duplicate_name(client):
    """Test a duplicate store name is rejected without inserting a row."""
    client.post("/api/v1/stores", json={"name": "Unique Name"})

    response = client.post("/api/v1/stores", json={"name": "Unique Name"})

    assert response.status_code == 409
    assert response.json()["error"]["message"] == 'Store with name "Unique Name" already exists'
    assert len(client.get("/api/v1/stores").json()) == 1


def test_list_stores(client):
    """Test listing returns exactly the created stores in creation order."""
    names = ["Alpha", "Beta", "Gamma"]
    for name in names:
        client.post("/api/v1/stores", json={"name": name})

    response = client.get("/api/v1/stores")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == names


def test_list_stores_empty(client):
    """Test listing with no stores returns an empty list."""
    response = client.get("/api/v1/stores")

    assert response.status_code == 200
    assert response.json() == []


def test_get_store(client, store):
    """Test getting a store by ID."""
    response = client.get(f"/api/v1/stores/{store['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Corner Shop"


def test_get_store_not_found(client):
    """Test getting non-existent store returns 404 naming the id."""
    response = client.get("/api/v1/stores/9999")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["message"] == "Store with ID 9999 not found"


def test_get_store_invalid_id(client):
    """Test a non-integer id is a validation error."""
    response = client.get("/api/v1/stores/abc")

    assert response.status_code == 400


def test_update_store_partial(client, store):
    """Test only supplied fields change."""
    response = client.put(
        f"/api/v1/stores/{store['id']}",
        json={"name": "Renamed Shop"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed Shop"
    assert data["address"] == "1 High Street"  # Unchanged
    assert data["phone"] == "555-0100"  # Unchanged


def test_update_store_null_clears_optional_fields(client, store):
    """Test explicit null clears address while omitted phone is kept."""
    response = client.put(
        f"/api/v1/stores/{store['id']}",
        json={"address": None}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["address"] is None
    assert data["phone"] == "555-0100"


def test_update_store_null_name_rejected(client, store):
    """Test the name cannot be cleared."""
    response = client.put(f"/api/v1/stores/{store['id']}", json={"name": None})

    assert response.status_code == 400
    assert "name" in response.json()["error"]["details"]


def test_update_store_not_found(client):
    """Test updating non-existent store returns 404."""
    response = client.put("/api/v1/stores/9999", json={"name": "Ghost"})

    assert response.status_code == 404


def test_update_store_duplicate_name(client, store):
    """Test renaming to an existing name returns 409 and leaves the store unchanged."""
    other = client.post("/api/v1/stores", json={"name": "Other Shop"}).json()

    response = client.put(f"/api/v1/stores/{other['id']}", json={"name": "Corner Shop"})

    assert response.status_code == 409
    assert client.get(f"/api/v1/stores/{other['id']}").json()["name"] == "Other Shop"


def test_update_store_keeps_own_name(client, store):
    """Test re-submitting a store's own name is not a conflict."""
    response = client.put(f"/api/v1/stores/{store['id']}", json={"name": "Corner Shop"})

    assert response.status_code == 200


def test_delete_store(client, store):
    """Test deleting a store."""
    response = client.delete(f"/api/v1/stores/{store['id']}")
    assert response.status_code == 204
    assert response.content == b""

    # Verify it's deleted
    get_response = client.get(f"/api/v1/stores/{store['id']}")
    assert get_response.status_code == 404


def test_delete_store_not_found(client):
    """Test deleting non-existent store returns 404."""
    response = client.delete("/api/v1/stores/9999")

    assert response.status_code == 404


def test_delete_store_cascades_to_products(client, store, make_product):
    """Test deleting a store removes every one of its products."""
    product_ids = [make_product(name=f"Item {i}", sku=f"SKU-{i}")["id"] for i in range(3)]
    other_store = client.post("/api/v1/stores", json={"name": "Survivor"}).json()
    survivor = make_product(store_id=other_store["id"], name="Kept")

    response = client.delete(f"/api/v1/stores/{store['id']}")
    assert response.status_code == 204

    # Listing against the removed store fails because the store is gone
    assert client.get(f"/api/v1/stores/{store['id']}/products").status_code == 404
    for product_id in product_ids:
        assert client.get(f"/api/v1/products/{product_id}").status_code == 404

    # Products of other stores are untouched
    assert client.get(f"/api/v1/products/{survivor['id']}").status_code == 200


def test_delete_store_frees_skus(client, store, make_product):
    """Test SKUs of deleted products can be reused."""
    make_product(sku="REUSE-1")
    client.delete(f"/api/v1/stores/{store['id']}")

    new_store = client.post("/api/v1/stores", json={"name": "Fresh"}).json()
    response = client.post(
        f"/api/v1/stores/{new_store['id']}/products",
        json={"name": "Again", "category": "General", "price": 1.50, "sku": "REUSE-1"}
    )

    assert response.status_code == 201
