"""Tests for the HTTP API."""

from decimal import Decimal

import pytest

from sales.models import Address, LineItem, Order, OrderDocument

pytestmark = pytest.mark.django_db


def stage(api_client, client_id, product_id, quantity):
    return api_client.post(
        "/line-items",
        {"clientId": client_id, "productId": product_id, "quantity": quantity},
        format="json",
    )


class TestStageLineItem:
    def test_created(self, api_client, products):
        response = stage(api_client, "C1", "P1", 2)

        assert response.status_code == 201
        data = response.json()
        assert data["message"]
        item = LineItem.objects.get(pk=data["id"])
        assert item.amount == Decimal("20.00")

    def test_unknown_product(self, api_client, products, recorder):
        response = stage(api_client, "C1", "UNKNOWN", 1)

        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"
        assert recorder.classes == ["4xx"]

    def test_invalid_payload(self, api_client, products):
        response = api_client.post("/line-items", {"clientId": "C1", "quantity": 0}, format="json")

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert "productId" in errors
        assert "quantity" in errors


class TestCreateOrder:
    def test_end_to_end(
        self, api_client, products, shipping_address, notification_target, recorder,
        django_capture_on_commit_callbacks,
    ):
        assert stage(api_client, "C1", "P1", 2).status_code == 201
        assert stage(api_client, "C1", "P2", 1).status_code == 201

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post("/orders", {"clientId": "C1"}, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["total"] == "25.00"
        assert data["clientId"] == "C1"
        assert data["documentUrl"] == f"http://sales.test/orders/{data['id']}"

        assert OrderDocument.objects.filter(order_id=data["id"]).count() == 1
        assert LineItem.objects.filter(client_id="C1").count() == 0
        assert len(notification_target.requests) == 1
        assert recorder.classes == ["2xx", "2xx", "2xx"]
        assert [route for _, route in recorder.durations][-1] == "POST /orders"

    def test_notification_failure_keeps_201(
        self, api_client, products, shipping_address, notification_target,
        django_capture_on_commit_callbacks,
    ):
        notification_target.fail_transport = True
        stage(api_client, "C1", "P1", 1)

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post("/orders", {"clientId": "C1"}, format="json")

        assert response.status_code == 201
        assert len(notification_target.requests) == 1

    def test_no_shipping_address(self, api_client, products, make_address, recorder):
        make_address("C1", Address.BILLING, street="Only billing")
        stage(api_client, "C1", "P1", 1)

        response = api_client.post("/orders", {"clientId": "C1"}, format="json")

        assert response.status_code == 400
        assert "shipping" in response.json()["error"]
        assert Order.objects.count() == 0
        assert recorder.classes[-1] == "4xx"

    def test_missing_client_id(self, api_client):
        response = api_client.post("/orders", {}, format="json")

        assert response.status_code == 400
        assert "clientId" in response.json()["errors"]

    def test_malformed_json_counts_as_client_error(self, api_client, recorder):
        response = api_client.post("/orders", data="{not json", content_type="application/json")

        assert response.status_code == 400
        assert recorder.classes == ["4xx"]

    def test_storage_failure(self, api_client, shipping_address, monkeypatch, recorder):
        from sales import assembler

        def broken_render(order, now):
            raise RuntimeError("renderer crashed")

        monkeypatch.setattr(assembler, "render_order", broken_render)

        response = api_client.post("/orders", {"clientId": "C1"}, format="json")

        assert response.status_code == 500
        assert response.json()["details"] == "renderer crashed"
        assert recorder.classes[-1] == "5xx"


class TestDownloadOrder:
    def test_returns_document_and_marks_read(self, api_client, products, shipping_address):
        stage(api_client, "C1", "P1", 1)
        order_id = api_client.post("/orders", {"clientId": "C1"}, format="json").json()["id"]

        response = api_client.get(f"/orders/{order_id}")

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert response["Content-Disposition"] == f'attachment; filename="nota-venta-{order_id}.pdf"'
        assert response.content.startswith(b"%PDF")
        assert OrderDocument.objects.get(order_id=order_id).is_read is True

    def test_missing_document(self, api_client, recorder):
        response = api_client.get("/orders/00000000-0000-4000-8000-000000000000")

        assert response.status_code == 404
        assert recorder.classes == ["4xx"]


class TestListOrders:
    def test_filter_by_client(self, api_client, make_address, shipping_address):
        make_address("C2", Address.SHIPPING, street="Other", state="Colima")
        api_client.post("/orders", {"clientId": "C1"}, format="json")
        api_client.post("/orders", {"clientId": "C2"}, format="json")

        all_orders = api_client.get("/orders").json()
        assert len(all_orders) == 2

        response = api_client.get("/orders", {"clientId": "C2"})
        assert response.status_code == 200
        orders = response.json()
        assert len(orders) == 1
        assert orders[0]["clientId"] == "C2"
        assert orders[0]["billingAddress"] == orders[0]["shippingAddress"]
        assert orders[0]["lineItems"] == []
        assert orders[0]["total"] == "0.00"
