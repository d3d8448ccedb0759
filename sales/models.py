import uuid

from django.conf import settings
from django.db import models


class Product(models.Model):
    """
    Catalog product. Reference data maintained outside the order workflow.
    """

    id = models.CharField(primary_key=True, max_length=100)
    base_price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = "sales_products"
        ordering = ["id"]
        verbose_name = "Product"
        verbose_name_plural = "Products"

    def __str__(self):
        return f"{self.id} (${self.base_price})"


class Address(models.Model):
    """
    A customer address tagged as billing or shipping.

    Billing fields may be left blank; order assembly fills them from the
    shipping address.
    """

    BILLING = "billing"
    SHIPPING = "shipping"
    ADDRESS_TYPE_CHOICES = [
        (BILLING, "Billing"),
        (SHIPPING, "Shipping"),
    ]

    client_id = models.CharField(max_length=255, db_index=True)
    address_type = models.CharField(max_length=20, choices=ADDRESS_TYPE_CHOICES)
    street = models.CharField(max_length=255, blank=True)
    neighborhood = models.CharField(max_length=255, blank=True)
    municipality = models.CharField(max_length=255, blank=True)
    state = models.CharField(max_length=255, blank=True)

    FIELDS = ("street", "neighborhood", "municipality", "state")

    class Meta:
        db_table = "sales_addresses"
        ordering = ["id"]
        verbose_name = "Address"
        verbose_name_plural = "Addresses"

    def __str__(self):
        return f"{self.client_id} [{self.address_type}] {self.street}"

    def as_dict(self):
        return {field: getattr(self, field) for field in self.FIELDS}


class LineItem(models.Model):
    """
    A product quantity staged by a client, waiting to be consumed by an order.

    unit_price and amount are snapshots taken at staging time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client_id = models.CharField(max_length=255, db_index=True)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="line_items")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    staged_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "sales_line_items"
        ordering = ["staged_at", "id"]
        verbose_name = "Staged line item"
        verbose_name_plural = "Staged line items"

    def __str__(self):
        return f"{self.quantity}x {self.product_id} for {self.client_id}"

    def snapshot(self):
        """Return the JSON-safe copy stored on an order."""
        return {
            "id": str(self.id),
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "amount": str(self.amount),
        }


class Order(models.Model):
    """
    An immutable sales order ("nota de venta").

    Addresses and line items are stored as snapshots; total is fixed when the
    order is assembled and never recomputed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client_id = models.CharField(max_length=255, db_index=True)
    billing_address = models.JSONField()
    shipping_address = models.JSONField()
    line_items = models.JSONField(default=list)
    total = models.DecimalField(max_digits=14, decimal_places=2)
    created_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = "sales_orders"
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"

    def __str__(self):
        return f"Order {self.id} - {self.client_id}"

    @property
    def document_url(self):
        return f"{settings.SALES_API_BASE_URL}/orders/{self.id}"


class OrderDocument(models.Model):
    """
    Archived, rendered document of an order plus its read metadata.

    The metadata mapping is replaced wholesale on every update.
    """

    READ_FLAG = "read"
    CONTENT_TYPE = "application/pdf"

    order = models.OneToOneField(Order, on_delete=models.CASCADE, primary_key=True, related_name="document")
    content = models.BinaryField()
    content_type = models.CharField(max_length=100, default=CONTENT_TYPE)
    metadata = models.JSONField(default=dict)
    stored_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "sales_order_documents"
        verbose_name = "Order document"
        verbose_name_plural = "Order documents"

    def __str__(self):
        return f"Document for order {self.order_id}"

    @property
    def is_read(self):
        return self.metadata.get(self.READ_FLAG) == "true"

    @property
    def filename(self):
        return f"nota-venta-{self.order_id}.pdf"
