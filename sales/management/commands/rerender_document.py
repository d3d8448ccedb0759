"""
Django management command to re-render an order's archived document.
"""
import logging
import sys
import uuid

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from sales.archive import ArchiveStore
from sales.errors import DependencyError
from sales.models import Order
from sales.renderer import render_order

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Render an order's document again from its stored snapshot and archive it (or write it to a file)"

    def add_arguments(self, parser):
        parser.add_argument("order_id", help="Identifier of the order to render")
        parser.add_argument(
            "--output",
            default=None,
            help="Write the PDF to this path instead of archiving it ('-' for stdout)",
        )

    def handle(self, *args, **options):
        order_id = options["order_id"]
        output = options.get("output")

        try:
            uuid.UUID(order_id)
        except ValueError:
            raise CommandError(f"Invalid order id: {order_id}")

        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            raise CommandError(f"Order {order_id} not found")

        content = render_order(order, timezone.localtime())
        logger.info(f"Rendered document for order {order_id} ({len(content)} bytes)")

        if output == "-":
            sys.stdout.buffer.write(content)
            return
        if output:
            with open(output, "wb") as fh:
                fh.write(content)
            self.stdout.write(self.style.SUCCESS(f"Wrote document for order {order_id} to {output}"))
            return

        try:
            ArchiveStore().store(order.id, content)
        except DependencyError as e:
            raise CommandError(f"Failed to archive document: {e} {e.details}")

        self.stdout.write(self.style.SUCCESS(f"Archived document for order {order_id} (unread)"))
