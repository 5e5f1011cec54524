"""Tests for Checkout and Sales API endpoints."""
from decimal import Decimal
from unittest.mock import patch


def _create_product(client, name="Test Product", price="10.00", stock=10):
    response = client.post(
        "/api/v1/products/",
        json={"name": name, "price": price, "stock_quantity": stock}
    )
    return response.json()["id"]


def test_checkout_success(client):
    """Test checking out a two-line cart."""
    product_a = _create_product(client, "Product A", "10.00", 10)
    product_b = _create_product(client, "Product B", "5.00", 10)
    
    # Mock Celery task to avoid actual task execution
    with patch("retailpos.api.sales.check_stock_levels.delay") as delay:
        response = client.post(
            "/api/v1/checkout/",
            json={
                "lines": [
                    {"product_id": product_a, "quantity": 2, "unit_price": "10.00"},
                    {"product_id": product_b, "quantity": 1, "unit_price": "5.00"},
                ],
                "payment_method": "card",
            }
        )
    
    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["total_amount"]) == Decimal("25.00")
    assert data["payment_method"] == "card"
    assert [item["product_name"] for item in data["items"]] == ["Product A", "Product B"]
    assert [Decimal(item["total_price"]) for item in data["items"]] == [Decimal("20.00"), Decimal("5.00")]
    delay.assert_called_once_with([product_a, product_b])


def test_checkout_decrements_stock(client):
    """Test that a checkout decrements product stock."""
    product_id = _create_product(client, "Stock Test", "25.00", 10)
    
    with patch("retailpos.api.sales.check_stock_levels.delay"):
        client.post(
            "/api/v1/checkout/",
            json={"lines": [{"product_id": product_id, "quantity": 3}]}
        )
    
    product = client.get(f"/api/v1/products/{product_id}").json()
    assert product["stock_quantity"] == 7  # 10 - 3


def test_checkout_insufficient_stock(client):
    """Test checkout fails when insufficient stock."""
    product_id = _create_product(client, "Limited Product", "50.00", 3)
    
    with patch("retailpos.api.sales.check_stock_levels.delay") as delay:
        response = client.post(
            "/api/v1/checkout/",
            json={"lines": [{"product_id": product_id, "quantity": 5}]}
        )
    
    assert response.status_code == 409
    assert "Insufficient stock" in response.json()["detail"]
    delay.assert_not_called()
    assert client.get(f"/api/v1/products/{product_id}").json()["stock_quantity"] == 3


def test_checkout_product_not_found(client):
    """Test checkout fails when a product doesn't exist, leaving stock untouched."""
    product_id = _create_product(client, "Real", "1.00", 10)
    
    with patch("retailpos.api.sales.check_stock_levels.delay"):
        response = client.post(
            "/api/v1/checkout/",
            json={
                "lines": [
                    {"product_id": product_id, "quantity": 1},
                    {"product_id": 9999, "quantity": 1},
                ]
            }
        )
    
    assert response.status_code == 404
    assert client.get(f"/api/v1/products/{product_id}").json()["stock_quantity"] == 10
    assert client.get("/api/v1/sales/").json()["total"] == 0


def test_checkout_empty_cart(client):
    """Test an empty cart is rejected."""
    response = client.post("/api/v1/checkout/", json={"lines": []})
    
    assert response.status_code == 422


def test_checkout_non_positive_quantity(client):
    """Test a zero quantity is rejected before anything is written."""
    product_id = _create_product(client)
    
    response = client.post(
        "/api/v1/checkout/",
        json={"lines": [{"product_id": product_id, "quantity": 0}]}
    )
    
    assert response.status_code == 422
    assert client.get(f"/api/v1/products/{product_id}").json()["stock_quantity"] == 10


def test_checkout_unknown_customer(client):
    """Test checkout against a missing customer fails."""
    product_id = _create_product(client)
    
    response = client.post(
        "/api/v1/checkout/",
        json={"lines": [{"product_id": product_id, "quantity": 1}], "customer_id": 77}
    )
    
    assert response.status_code == 404


def test_multiple_checkouts_deplete_stock(client):
    """Test multiple checkouts correctly deplete stock."""
    product_id = _create_product(client, "Depleting Product", "10.00", 5)
    
    with patch("retailpos.api.sales.check_stock_levels.delay"):
        response1 = client.post(
            "/api/v1/checkout/",
            json={"lines": [{"product_id": product_id, "quantity": 3}]}
        )
        response2 = client.post(
            "/api/v1/checkout/",
            json={"lines": [{"product_id": product_id, "quantity": 2}]}
        )
        response3 = client.post(
            "/api/v1/checkout/",
            json={"lines": [{"product_id": product_id, "quantity": 1}]}
        )
    
    assert response1.status_code == 201
    assert response2.status_code == 201
    assert response3.status_code == 409


def test_get_sale(client):
    """Test getting a sale by ID."""
    product_id = _create_product(client)
    customer = client.post("/api/v1/customers/", json={"name": "Ada"}).json()
    
    with patch("retailpos.api.sales.check_stock_levels.delay"):
        sale_response = client.post(
            "/api/v1/checkout/",
            json={"lines": [{"product_id": product_id, "quantity": 1}], "customer_id": customer["id"]}
        )
    sale_id = sale_response.json()["id"]
    
    response = client.get(f"/api/v1/sales/{sale_id}")
    
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == sale_id
    assert data["customer_id"] == customer["id"]
    assert data["customer_name"] == "Ada"
    assert len(data["items"]) == 1


def test_get_sale_not_found(client):
    response = client.get("/api/v1/sales/4242")
    
    assert response.status_code == 404


def test_list_sales(client):
    """Test listing sales with pagination."""
    product_id = _create_product(client, "Multi Sale", "10.00", 100)
    
    with patch("retailpos.api.sales.check_stock_levels.delay"):
        for _ in range(15):
            client.post(
                "/api/v1/checkout/",
                json={"lines": [{"product_id": product_id, "quantity": 1}]}
            )
    
    response = client.get("/api/v1/sales/?page=1&page_size=10")
    
    assert response.status_code == 200
    data = response.json()
    assert len(data["items"]) == 10
    assert data["total"] == 15
    assert data["items"][0]["id"] > data["items"][-1]["id"]
