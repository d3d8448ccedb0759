"""Tests for the management commands."""

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from sales.archive import ArchiveStore
from sales.assembler import OrderAssembler
from sales.models import OrderDocument

pytestmark = pytest.mark.django_db


@pytest.fixture
def order(notification_target, shipping_address):
    return OrderAssembler(dispatcher=notification_target.dispatcher()).create_order("C1")


def test_rerender_archives_unread_document(order):
    ArchiveStore().fetch_and_mark_read(order.id)
    out = StringIO()

    call_command("rerender_document", str(order.id), stdout=out)

    assert "Archived" in out.getvalue()
    document = OrderDocument.objects.get(order=order)
    assert document.is_read is False
    assert bytes(document.content).startswith(b"%PDF")


def test_rerender_to_file(order, tmp_path):
    target = tmp_path / "nota.pdf"

    call_command("rerender_document", str(order.id), output=str(target), stdout=StringIO())

    assert target.read_bytes().startswith(b"%PDF")


def test_rerender_unknown_order(db):
    with pytest.raises(CommandError):
        call_command("rerender_document", "00000000-0000-4000-8000-000000000000")


def test_rerender_malformed_order_id(db):
    with pytest.raises(CommandError, match="Invalid order id"):
        call_command("rerender_document", "not-a-uuid")
