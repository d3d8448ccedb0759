"""Tests for the order document archive."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from sales.archive import ArchiveStore
from sales.errors import NotFoundError
from sales.models import Order, OrderDocument

pytestmark = pytest.mark.django_db

ADDRESS = {"street": "S", "neighborhood": "N", "municipality": "M", "state": "E"}


@pytest.fixture
def order():
    return Order.objects.create(
        client_id="C1",
        billing_address=ADDRESS,
        shipping_address=ADDRESS,
        line_items=[],
        total=Decimal("0.00"),
        created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
    )


@pytest.fixture
def archive():
    return ArchiveStore()


def test_store_starts_unread(archive, order):
    archive.store(order.id, b"%PDF-1.4 test")

    document = OrderDocument.objects.get(order=order)
    assert bytes(document.content) == b"%PDF-1.4 test"
    assert document.content_type == "application/pdf"
    assert document.is_read is False


def test_fetch_marks_read(archive, order):
    archive.store(order.id, b"%PDF-1.4 test")

    first = archive.fetch_and_mark_read(order.id)
    assert first.content == b"%PDF-1.4 test"
    assert first.was_read is False
    assert first.filename == f"nota-venta-{order.id}.pdf"
    assert OrderDocument.objects.get(order=order).is_read is True

    second = archive.fetch_and_mark_read(order.id)
    assert second.was_read is True


def test_fetch_replaces_metadata(archive, order):
    archive.store(order.id, b"%PDF")
    OrderDocument.objects.filter(order=order).update(metadata={"read": "false", "origin": "import"})

    archive.fetch_and_mark_read(order.id)

    assert OrderDocument.objects.get(order=order).metadata == {"read": "true"}


def test_store_again_resets_read_flag(archive, order):
    archive.store(order.id, b"%PDF v1")
    archive.fetch_and_mark_read(order.id)

    archive.store(order.id, b"%PDF v2")

    document = OrderDocument.objects.get(order=order)
    assert bytes(document.content) == b"%PDF v2"
    assert document.is_read is False


def test_fetch_missing_document(archive):
    with pytest.raises(NotFoundError):
        archive.fetch_and_mark_read("00000000-0000-4000-8000-000000000000")
