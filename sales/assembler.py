"""
Order assembly: staging line items and turning them into an order.
"""
import logging
import threading
from contextlib import contextmanager
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.utils import timezone

from .archive import ArchiveStore
from .errors import DependencyError, NotFoundError, SalesError, ValidationError
from .models import Address, LineItem, Order, Product
from .notifications import NotificationDispatcher
from .renderer import render_order

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
# client_id -> [lock, number of callers holding or waiting on it]
_client_locks = {}


@contextmanager
def client_lock(client_id):
    """
    Serialize order creation for one client within this process.

    The entry for a client is dropped once its last caller leaves.
    """
    with _locks_guard:
        entry = _client_locks.setdefault(client_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                _client_locks.pop(client_id, None)


def merge_billing_address(billing, shipping):
    """Take each billing field when present, else the shipping field."""
    billing = billing or {}
    return {field: billing.get(field) or shipping.get(field) for field in Address.FIELDS}


class LineItemStager:
    def stage(self, client_id, product_id, quantity):
        """
        Stage ``quantity`` units of a product for a client.

        The product's current base price is copied onto the line item, so
        later price changes do not affect it.

        Raises:
            NotFoundError: if the product does not exist
            DependencyError: on storage failure
        """
        try:
            product = Product.objects.filter(pk=product_id).first()
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")

            line_item = LineItem.objects.create(
                client_id=client_id,
                product=product,
                quantity=quantity,
                unit_price=product.base_price,
                amount=quantity * product.base_price,
            )
        except DatabaseError as e:
            logger.error(f"Error staging line item for client {client_id}: {e}", exc_info=True)
            raise DependencyError("Error staging line item", cause=e) from e

        logger.info(f"Staged line item {line_item.id}: {quantity}x {product_id} for client {client_id}")
        return line_item


class OrderAssembler:
    """
    Builds an order from a client's addresses and staged line items.

    Persisting the order, archiving its document and removing the consumed
    line items happen in one transaction; the notification is sent after
    commit and cannot fail the call.
    """

    def __init__(self, archive=None, dispatcher=None, clock=None):
        self.archive = archive or ArchiveStore()
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.clock = clock or timezone.now

    def create_order(self, client_id) -> Order:
        """
        Raises:
            ValidationError: if the client has no shipping address
            DependencyError: on any storage or rendering failure; nothing
                is persisted and the line items stay staged
        """
        logger.info(f"Creating order for client {client_id}")

        with client_lock(client_id):
            try:
                with transaction.atomic():
                    order = self._assemble(client_id)
                    transaction.on_commit(
                        lambda: self.dispatcher.notify(order.id, client_id)
                    )
            except SalesError:
                raise
            except Exception as e:
                logger.error(f"Error creating order for client {client_id}: {e}", exc_info=True)
                raise DependencyError("Error creating order", cause=e) from e

        logger.info(f"Order {order.id} created for client {client_id} with total {order.total}")
        return order

    def _assemble(self, client_id):
        billing, shipping = self._select_addresses(client_id)

        # Claim the staged items: the ids read here are exactly the ids removed
        line_items = list(
            LineItem.objects.select_for_update().filter(client_id=client_id).order_by("staged_at", "id")
        )
        claimed_ids = [item.id for item in line_items]
        total = sum((item.amount for item in line_items), Decimal("0.00"))

        order = Order.objects.create(
            client_id=client_id,
            billing_address=merge_billing_address(billing, shipping),
            shipping_address=shipping,
            line_items=[item.snapshot() for item in line_items],
            total=total,
            created_at=self.clock(),
        )

        content = render_order(order, timezone.localtime(order.created_at))
        self.archive.store(order.id, content)

        deleted, _ = LineItem.objects.filter(pk__in=claimed_ids).delete()
        logger.info(f"Removed {deleted} staged line items for client {client_id}")
        return order

    def _select_addresses(self, client_id):
        billing = None
        shipping = None
        for address in Address.objects.filter(client_id=client_id).order_by("id"):
            if address.address_type == Address.BILLING and billing is None:
                billing = address.as_dict()
            elif address.address_type == Address.SHIPPING and shipping is None:
                shipping = address.as_dict()

        if shipping is None:
            logger.warning(f"Client {client_id} has no shipping address")
            raise ValidationError("Client must have a registered shipping address")

        return billing, shipping


def list_orders(client_id=None):
    queryset = Order.objects.all()
    if client_id:
        queryset = queryset.filter(client_id=client_id)
    try:
        return list(queryset)
    except DatabaseError as e:
        logger.error(f"Error listing orders: {e}", exc_info=True)
        raise DependencyError("Error listing orders", cause=e) from e
