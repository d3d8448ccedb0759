from django.contrib import admin
from .models import Address, LineItem, Order, OrderDocument, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for the product catalog."""

    list_display = ("id", "base_price")
    search_fields = ("id",)


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    """Admin interface for client addresses."""

    list_display = ("client_id", "address_type", "street", "municipality", "state")
    list_filter = ("address_type",)
    search_fields = ("client_id", "street", "neighborhood", "municipality")


@admin.register(LineItem)
class LineItemAdmin(admin.ModelAdmin):
    """Admin interface for staged line items."""

    list_display = ("client_id", "product", "quantity", "unit_price", "amount", "staged_at")
    list_filter = ("staged_at",)
    search_fields = ("client_id", "product__id")
    readonly_fields = ("unit_price", "amount", "staged_at")


class OrderDocumentInline(admin.StackedInline):
    """Inline admin for the archived document within Order admin."""

    model = OrderDocument
    extra = 0
    can_delete = False
    fields = ("content_type", "metadata", "stored_at")
    readonly_fields = ("content_type", "metadata", "stored_at")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for Order model. Orders are immutable once created."""

    list_display = ("id", "client_id", "total", "created_at")
    list_filter = ("created_at",)
    search_fields = ("id", "client_id")
    readonly_fields = (
        "id",
        "client_id",
        "billing_address",
        "shipping_address",
        "line_items",
        "total",
        "created_at",
    )
    inlines = [OrderDocumentInline]

    fieldsets = (
        (
            "Order Information",
            {
                "fields": ("id", "client_id", "total", "created_at"),
            },
        ),
        (
            "Addresses",
            {
                "fields": ("billing_address", "shipping_address"),
            },
        ),
        (
            "Line Items",
            {
                "fields": ("line_items",),
            },
        ),
    )

    def has_add_permission(self, request):
        return False
