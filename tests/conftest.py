"""Pytest fixtures for sales tests."""

from concurrent.futures import Future
from decimal import Decimal

import httpx
import pytest
from rest_framework.test import APIClient

from sales import assembler, metrics
from sales.models import Address, Product
from sales.notifications import NotificationDispatcher


class InlineExecutor:
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class FakeRecorder(metrics.MetricsRecorder):
    def __init__(self):
        self.durations = []
        self.classes = []

    def record_duration(self, ms, route):
        self.durations.append((ms, route))

    def increment_class(self, status_class):
        self.classes.append(status_class)


class NotificationTarget:
    """Stand-in for the notification service behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.fail_transport = False

    def handler(self, request):
        self.requests.append(request)
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})

    def dispatcher(self):
        return NotificationDispatcher(
            executor=InlineExecutor(),
            transport=httpx.MockTransport(self.handler),
            service_url="http://notifications.test/notify-sale",
        )


@pytest.fixture(autouse=True)
def recorder():
    fake = FakeRecorder()
    metrics.set_recorder(fake)
    yield fake
    metrics.set_recorder(None)


@pytest.fixture(autouse=True)
def notification_target(monkeypatch):
    """Route every dispatcher built by the assembler to a mock target."""
    target = NotificationTarget()
    monkeypatch.setattr(assembler, "NotificationDispatcher", target.dispatcher)
    return target


@pytest.fixture(autouse=True)
def sales_settings(settings):
    settings.SALES_API_BASE_URL = "http://sales.test"


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def products(db):
    return {
        "P1": Product.objects.create(id="P1", base_price=Decimal("10.00")),
        "P2": Product.objects.create(id="P2", base_price=Decimal("5.00")),
    }


@pytest.fixture
def make_address(db):
    def _make(client_id, address_type, **fields):
        values = {
            "street": "",
            "neighborhood": "",
            "municipality": "",
            "state": "",
        }
        values.update(fields)
        return Address.objects.create(client_id=client_id, address_type=address_type, **values)

    return _make


@pytest.fixture
def shipping_address(make_address):
    return make_address(
        "C1",
        Address.SHIPPING,
        street="Av. Vallarta 1234",
        neighborhood="Americana",
        municipality="Guadalajara",
        state="Jalisco",
    )
