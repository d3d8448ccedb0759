from rest_framework import serializers
from .models import Order


class StageLineItemSerializer(serializers.Serializer):
    """
    Serializer for staging a line item.
    Field names follow the public camelCase payload.
    """

    clientId = serializers.CharField(max_length=255, source="client_id")
    productId = serializers.CharField(max_length=100, source="product_id")
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    clientId = serializers.CharField(max_length=255, source="client_id")


class LineItemSnapshotSerializer(serializers.Serializer):
    """Line item as frozen on an order."""

    id = serializers.CharField()
    productId = serializers.CharField(source="product_id")
    quantity = serializers.IntegerField()
    unitPrice = serializers.CharField(source="unit_price")
    amount = serializers.CharField()


class AddressSnapshotSerializer(serializers.Serializer):
    street = serializers.CharField(allow_blank=True, allow_null=True)
    neighborhood = serializers.CharField(allow_blank=True, allow_null=True)
    municipality = serializers.CharField(allow_blank=True, allow_null=True)
    state = serializers.CharField(allow_blank=True, allow_null=True)


class OrderDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for Order model with its address and line-item snapshots (for reading).
    """

    clientId = serializers.CharField(source="client_id")
    billingAddress = AddressSnapshotSerializer(source="billing_address")
    shippingAddress = AddressSnapshotSerializer(source="shipping_address")
    lineItems = LineItemSnapshotSerializer(source="line_items", many=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    createdAt = serializers.DateTimeField(source="created_at")
    documentUrl = serializers.CharField(source="document_url")

    class Meta:
        model = Order
        fields = [
            "id",
            "clientId",
            "billingAddress",
            "shippingAddress",
            "lineItems",
            "total",
            "createdAt",
            "documentUrl",
        ]
