"""
Tests for customer endpoints.
"""
from datetime import datetime


def _create(client, name, email=None, phone=None):
    payload = {"name": name}
    if email:
        payload["email"] = email
    if phone:
        payload["phone"] = phone
    response = client.post("/api/v1/customers/", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_customer(client):
    data = _create(client, "Jordan Lee", email="jordan@example.com")

    assert data["name"] == "Jordan Lee"
    assert data["email"] == "jordan@example.com"
    assert "id" in data
    assert "created_at" in data


def test_create_customer_invalid_email(client):
    response = client.post("/api/v1/customers/", json={"name": "Jordan", "email": "not-an-email"})

    assert response.status_code == 422


def test_create_customer_requires_name(client):
    response = client.post("/api/v1/customers/", json={"name": ""})

    assert response.status_code == 422


def test_get_customer(client):
    created = _create(client, "Ana")

    response = client.get(f"/api/v1/customers/{created['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Ana"


def test_get_customer_not_found(client):
    response = client.get("/api/v1/customers/999")

    assert response.status_code == 404


def test_list_customers_sorted_and_paginated(client):
    for name in ["Carla", "Ana", "Bruno"]:
        _create(client, name)

    response = client.get("/api/v1/customers/?page=1&page_size=2")

    data = response.json()
    assert [c["name"] for c in data["items"]] == ["Ana", "Bruno"]
    assert data["total"] == 3
    assert data["total_pages"] == 2


def test_search_customers(client):
    _create(client, "Ana", email="ana@shop.test")
    _create(client, "Bruno", phone="555-0101")

    by_email = client.get("/api/v1/customers/?search=shop.test").json()
    by_phone = client.get("/api/v1/customers/?search=0101").json()

    assert [c["name"] for c in by_email["items"]] == ["Ana"]
    assert [c["name"] for c in by_phone["items"]] == ["Bruno"]


def test_update_customer(client):
    created = _create(client, "Ana", email="ana@shop.test")

    response = client.put(f"/api/v1/customers/{created['id']}", json={"phone": "555-0199"})

    assert response.status_code == 200
    data = response.json()
    assert data["phone"] == "555-0199"
    assert data["email"] == "ana@shop.test"


def test_update_customer_not_found(client):
    response = client.put("/api/v1/customers/999", json={"name": "Nobody"})

    assert response.status_code == 404


def test_rename_keeps_sale_snapshot(client, make_product, make_customer, sell):
    product = make_product()
    customer = make_customer("Ana")
    sale = sell(datetime(2026, 3, 2, 12), (product, 1), customer_id=customer.id)

    client.put(f"/api/v1/customers/{customer.id}", json={"name": "Ana Maria"})
    response = client.get(f"/api/v1/sales/{sale.id}")

    assert response.json()["customer_name"] == "Ana"
