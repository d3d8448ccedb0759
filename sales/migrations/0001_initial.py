import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("base_price", models.DecimalField(decimal_places=2, max_digits=12)),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "sales_products",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Address",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("client_id", models.CharField(db_index=True, max_length=255)),
                (
                    "address_type",
                    models.CharField(
                        choices=[("billing", "Billing"), ("shipping", "Shipping")], max_length=20
                    ),
                ),
                ("street", models.CharField(blank=True, max_length=255)),
                ("neighborhood", models.CharField(blank=True, max_length=255)),
                ("municipality", models.CharField(blank=True, max_length=255)),
                ("state", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "verbose_name": "Address",
                "verbose_name_plural": "Addresses",
                "db_table": "sales_addresses",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("client_id", models.CharField(db_index=True, max_length=255)),
                ("billing_address", models.JSONField()),
                ("shipping_address", models.JSONField()),
                ("line_items", models.JSONField(default=list)),
                ("total", models.DecimalField(decimal_places=2, max_digits=14)),
                ("created_at", models.DateTimeField(db_index=True)),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "sales_orders",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="LineItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("client_id", models.CharField(db_index=True, max_length=255)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("staged_at", models.DateTimeField(auto_now_add=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="line_items",
                        to="sales.product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Staged line item",
                "verbose_name_plural": "Staged line items",
                "db_table": "sales_line_items",
                "ordering": ["staged_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="OrderDocument",
            fields=[
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="document",
                        serialize=False,
                        to="sales.order",
                    ),
                ),
                ("content", models.BinaryField()),
                ("content_type", models.CharField(default="application/pdf", max_length=100)),
                ("metadata", models.JSONField(default=dict)),
                ("stored_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Order document",
                "verbose_name_plural": "Order documents",
                "db_table": "sales_order_documents",
            },
        ),
    ]
