"""Integration tests for the HTTP API."""

from decimal import Decimal

from fastapi.testclient import TestClient

CUSTOMER = {"X-Actor-Id": "u1"}
OTHER_CUSTOMER = {"X-Actor-Id": "u2"}
ADMIN = {"X-Actor-Id": "admin-1", "X-Actor-Role": "admin"}

ADDRESS = {
    "first_name": "Rahim",
    "last_name": "Uddin",
    "email": "rahim@example.com",
    "phone": "01712345678",
    "address": "House 12, Road 5",
    "city": "Dhaka",
    "postal_code": "1205",
}


def checkout_body(**overrides):
    body = {
        "items": [{"product_id": "p1", "quantity": 2}],
        "shipping_address": dict(ADDRESS),
        "payment_method": "cod",
        "shipping_fee": "50",
    }
    body.update(overrides)
    return body


def place(client: TestClient, headers=CUSTOMER, **overrides) -> dict:
    response = client.post("/api/v1/orders", json=checkout_body(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCheckout:
    def test_place_order(self, test_client: TestClient, container):
        data = place(test_client)
        order = data["order"]

        assert order["order_number"].startswith("ORD-")
        assert order["user_id"] == "u1"
        assert Decimal(order["subtotal"]) == Decimal("200.00")
        assert Decimal(order["total"]) == Decimal("250.00")
        assert order["order_status"] == "pending"
        assert Decimal(order["items"][0]["commission"]["amount"]) == Decimal("20.00")
        assert order["items"][0]["commission"]["source"] == "category"
        assert data["execution_id"]
        assert container.catalog.stock_of("p1") == 8

    def test_requires_actor(self, test_client: TestClient):
        response = test_client.post("/api/v1/orders", json=checkout_body())

        assert response.status_code == 401

    def test_guest_checkout(self, test_client: TestClient):
        response = test_client.post("/api/v1/orders/guest", json=checkout_body())

        assert response.status_code == 201
        assert response.json()["order"]["user_id"] is None

    def test_insufficient_stock(self, test_client: TestClient, container):
        response = test_client.post(
            "/api/v1/orders",
            json=checkout_body(items=[{"product_id": "p2", "quantity": 6}]),
            headers=CUSTOMER,
        )

        assert response.status_code in (400, 409)
        assert response.json()["detail"]["message"]
        assert container.catalog.stock_of("p2") == 5

    def test_blacklisted_contact(self, test_client: TestClient):
        address = dict(ADDRESS, email="blocked@example.com")

        response = test_client.post(
            "/api/v1/orders", json=checkout_body(shipping_address=address), headers=CUSTOMER
        )

        assert response.status_code == 403
        assert response.json()["detail"]["reason"] == "fraud"

    def test_manual_order_requires_admin(self, test_client: TestClient):
        response = test_client.post(
            "/api/v1/orders",
            json=checkout_body(source_channel="admin_manual", user_id="u1"),
            headers=CUSTOMER,
        )

        assert response.status_code == 403

    def test_manual_order_by_admin(self, test_client: TestClient):
        data = place(test_client, headers=ADMIN, source_channel="admin_manual", user_id="u7")

        assert data["order"]["user_id"] == "u7"
        assert data["order"]["source_channel"] == "admin_manual"


class TestOrderAccess:
    def test_owner_and_admin_can_read(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        assert test_client.get(f"/api/v1/orders/{number}", headers=CUSTOMER).status_code == 200
        assert test_client.get(f"/api/v1/orders/{number}", headers=ADMIN).status_code == 200

    def test_other_customer_sees_not_found(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.get(f"/api/v1/orders/{number}", headers=OTHER_CUSTOMER)

        assert response.status_code == 404

    def test_unknown_order(self, test_client: TestClient):
        assert test_client.get("/api/v1/orders/ORD-0-0", headers=ADMIN).status_code == 404


class TestStatusUpdates:
    def test_illegal_transition_lists_allowed_next(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.patch(
            f"/api/v1/orders/{number}/status", json={"status": "delivered"}, headers=ADMIN
        )

        assert response.status_code == 409
        assert response.json()["detail"]["allowed_next"] == ["confirmed", "cancelled"]

    def test_customer_cannot_update_status(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.patch(
            f"/api/v1/orders/{number}/status", json={"status": "confirmed"}, headers=CUSTOMER
        )

        assert response.status_code == 403

    def test_vendor_cannot_update_status(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.patch(
            f"/api/v1/orders/{number}/status",
            json={"status": "cancelled"},
            headers={"X-Actor-Id": "v1", "X-Actor-Role": "vendor"},
        )

        assert response.status_code == 403
        assert test_client.get(f"/api/v1/orders/{number}", headers=CUSTOMER).json()["order_status"] == "pending"

    def test_confirm(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.patch(
            f"/api/v1/orders/{number}/status",
            json={"status": "confirmed", "note": "Phone verified"},
            headers=ADMIN,
        )

        data = response.json()
        assert response.status_code == 200
        assert data["previous_status"] == "pending"
        assert data["changed"] is True
        assert data["order"]["status_timeline"][-1]["note"] == "Phone verified"

    def test_owner_cancel_restores_stock(self, test_client: TestClient, container):
        number = place(test_client)["order"]["order_number"]

        response = test_client.post(
            f"/api/v1/orders/{number}/cancel", json={"reason": "Changed my mind"}, headers=CUSTOMER
        )

        assert response.status_code == 200
        assert response.json()["inventory_restored"] is True
        assert container.catalog.stock_of("p1") == 10

    def test_other_customer_cannot_cancel(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.post(f"/api/v1/orders/{number}/cancel", json={}, headers=OTHER_CUSTOMER)

        assert response.status_code == 404


class TestCourier:
    def test_local_consignment_with_warning(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.post(f"/api/v1/orders/{number}/courier/consignment", headers=ADMIN)

        data = response.json()
        assert response.status_code == 200
        assert data["warning"]
        assert data["order"]["shipping_meta"]["courier"]["consignment_id"].startswith(number)

    def test_second_consignment_conflicts(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]
        test_client.post(f"/api/v1/orders/{number}/courier/consignment", headers=ADMIN)

        again = test_client.post(f"/api/v1/orders/{number}/courier/consignment", headers=ADMIN)
        forced = test_client.post(
            f"/api/v1/orders/{number}/courier/consignment", params={"force": "true"}, headers=ADMIN
        )

        assert again.status_code == 409
        assert forced.status_code == 200

    def test_label_missing(self, test_client: TestClient):
        number = place(test_client)["order"]["order_number"]

        response = test_client.get(f"/api/v1/orders/{number}/courier/label", headers=ADMIN)

        assert response.status_code == 404


class TestAdminEndpoints:
    def test_customer_insights_admin_only(self, test_client: TestClient):
        place(test_client)

        denied = test_client.get("/api/v1/customers/insights", params={"phone": "01712345678"}, headers=CUSTOMER)
        allowed = test_client.get(
            "/api/v1/customers/insights", params={"phone": "+8801712345678"}, headers=ADMIN
        )

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["total_orders"] == 1

    def test_insights_require_identifier(self, test_client: TestClient):
        response = test_client.get("/api/v1/customers/insights", headers=ADMIN)

        assert response.status_code == 400

    def test_run_renewals(self, test_client: TestClient):
        response = test_client.post("/api/v1/subscriptions/renewals/run", params={"limit": 5}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["processed"] == 0


def test_health_and_root(test_client: TestClient):
    health = test_client.get("/health")
    root = test_client.get("/")

    assert health.json()["status"] == "healthy"
    assert health.json()["storage"] == "memory"
    assert health.json()["renewal_scheduler"] == "stopped"
    assert root.json()["health"] == "/health"
