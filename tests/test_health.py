"""Tests for health check endpoints."""


def test_health_check(client):
    """Test basic health check."""
    response = client.get("/api/v1/health/")
    
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_endpoint(client):
    """Test root endpoint returns API info."""
    response = client.get("/")
    
    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "version" in data
    assert "docs" in data


def test_store_stats_counts_catalog_and_ledger(client):
    """Test stats endpoint reports catalog and ledger sizes."""
    client.post(
        "/api/v1/products/",
        json={"name": "Counted", "price": "1.00", "stock_quantity": 1}
    )
    
    response = client.get("/api/v1/health/stats")
    
    assert response.status_code == 200
    assert response.json() == {"products": 1, "sales": 0}
