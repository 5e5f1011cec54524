"""Tests for Product and Category API endpoints."""
from decimal import Decimal
from unittest.mock import patch


def test_create_product(client):
    """Test creating a new product."""
    response = client.post(
        "/api/v1/products/",
        json={
            "name": "Test Product",
            "sku": "TP-001",
            "price": "99.99",
            "stock_quantity": 10
        }
    )
    
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Test Product"
    assert data["is_low_stock"] is False
    assert Decimal(data["price"]) == Decimal("99.99")
    assert data["stock_quantity"] == 10
    assert data["currency"] == "USD"
    assert data["low_stock_threshold"] == 5
    assert data["reorder_quantity"] == 20
    assert "id" in data
    assert "created_at" in data


def test_create_product_invalid_price(client):
    """Test creating product with invalid price fails."""
    response = client.post(
        "/api/v1/products/",
        json={
            "name": "Test Product",
            "price": "-10.00",  # Invalid: negative price
            "stock_quantity": 10
        }
    )
    
    assert response.status_code == 422


def test_create_product_invalid_stock(client):
    """Test creating product with negative stock fails."""
    response = client.post(
        "/api/v1/products/",
        json={
            "name": "Test Product",
            "price": "99.99",
            "stock_quantity": -5  # Invalid: negative stock
        }
    )
    
    assert response.status_code == 422


def test_create_product_unknown_category(client):
    """Test creating product in a missing category fails."""
    response = client.post(
        "/api/v1/products/",
        json={"name": "Orphan", "price": "1.00", "stock_quantity": 1, "category_id": 42}
    )
    
    assert response.status_code == 404


def test_get_product(client):
    """Test getting a product by ID."""
    create_response = client.post(
        "/api/v1/products/",
        json={"name": "Test Product", "price": "50.00", "stock_quantity": 5}
    )
    product_id = create_response.json()["id"]
    
    response = client.get(f"/api/v1/products/{product_id}")
    
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["name"] == "Test Product"
    assert data["is_low_stock"] is True


def test_get_product_cached(client, fake_cache):
    """Test cached lookup stores the product in Redis."""
    create_response = client.post(
        "/api/v1/products/",
        json={"name": "Cached", "price": "5.00", "stock_quantity": 3}
    )
    product_id = create_response.json()["id"]
    
    response = client.get(f"/api/v1/products/{product_id}/cached")
    
    assert response.status_code == 200
    assert response.json()["price"] == "5.00"
    assert f"product:{product_id}" in fake_cache.store


def test_get_product_not_found(client):
    """Test getting non-existent product returns 404."""
    response = client.get("/api/v1/products/9999")
    
    assert response.status_code == 404


def test_list_products(client):
    """Test listing products with pagination."""
    for i in range(15):
        client.post(
            "/api/v1/products/",
            json={"name": f"Product {i}", "price": f"{10 + i}.00", "stock_quantity": 10}
        )
    
    response = client.get("/api/v1/products/?page=1&page_size=10")
    
    assert response.status_code == 200
    data = response.json()
    assert len(data["items"]) == 10
    assert data["total"] == 15
    assert data["total_pages"] == 2


def test_update_product(client, fake_cache):
    """Test updating a product invalidates its cache entry."""
    create_response = client.post(
        "/api/v1/products/",
        json={"name": "Original Name", "price": "50.00", "stock_quantity": 10}
    )
    product_id = create_response.json()["id"]
    client.get(f"/api/v1/products/{product_id}/cached")
    
    response = client.put(
        f"/api/v1/products/{product_id}",
        json={"name": "Updated Name", "price": "75.00"}
    )
    
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Updated Name"
    assert Decimal(data["price"]) == Decimal("75.00")
    assert data["stock_quantity"] == 10  # Stock should remain unchanged
    assert f"product:{product_id}" not in fake_cache.store


def test_delete_product(client):
    """Test deleting a product."""
    create_response = client.post(
        "/api/v1/products/",
        json={"name": "To Delete", "price": "25.00", "stock_quantity": 5}
    )
    product_id = create_response.json()["id"]
    
    response = client.delete(f"/api/v1/products/{product_id}")
    assert response.status_code == 204
    
    get_response = client.get(f"/api/v1/products/{product_id}")
    assert get_response.status_code == 404


def test_delete_product_referenced_by_sale(client):
    """Test a product that was sold cannot be deleted."""
    create_response = client.post(
        "/api/v1/products/",
        json={"name": "Sold Once", "price": "25.00", "stock_quantity": 5}
    )
    product_id = create_response.json()["id"]
    with patch("retailpos.api.sales.check_stock_levels.delay"):
        client.post("/api/v1/checkout/", json={"lines": [{"product_id": product_id, "quantity": 1}]})
    
    response = client.delete(f"/api/v1/products/{product_id}")
    
    assert response.status_code == 409
    assert client.get(f"/api/v1/products/{product_id}").status_code == 200


def test_search_products(client):
    """Test searching products by name or SKU."""
    client.post(
        "/api/v1/products/",
        json={"name": "Apple iPhone", "sku": "ELEC-001", "price": "999.00", "stock_quantity": 10}
    )
    client.post(
        "/api/v1/products/",
        json={"name": "Samsung Galaxy", "sku": "ELEC-002", "price": "899.00", "stock_quantity": 15}
    )
    client.post(
        "/api/v1/products/",
        json={"name": "Rice (5kg)", "sku": "GROC-001", "price": "15.00", "stock_quantity": 50}
    )
    
    response = client.get("/api/v1/products/?search=Apple")
    assert response.json()["total"] == 1
    
    response = client.get("/api/v1/products/?search=ELEC")
    data = response.json()
    assert data["total"] == 2
    assert all(item["sku"].startswith("ELEC") for item in data["items"])


def test_category_lifecycle(client):
    """Test creating, filtering by and deleting a category."""
    category = client.post(
        "/api/v1/categories/",
        json={"name": "Groceries", "description": "Daily essentials"}
    ).json()
    
    duplicate = client.post("/api/v1/categories/", json={"name": "Groceries"})
    assert duplicate.status_code == 409
    
    product = client.post(
        "/api/v1/products/",
        json={"name": "Rice", "price": "15.00", "stock_quantity": 50, "category_id": category["id"]}
    ).json()
    
    listed = client.get(f"/api/v1/products/?category_id={category['id']}").json()
    assert [p["id"] for p in listed["items"]] == [product["id"]]
    
    # Category still owns a product
    assert client.delete(f"/api/v1/categories/{category['id']}").status_code == 409
    
    client.delete(f"/api/v1/products/{product['id']}")
    assert client.delete(f"/api/v1/categories/{category['id']}").status_code == 204
    assert client.get(f"/api/v1/categories/{category['id']}").status_code == 404
