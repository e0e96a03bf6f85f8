import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomerAccount",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                ("name", models.CharField(help_text="Customer display name", max_length=100)),
                (
                    "phone",
                    models.CharField(
                        blank=True,
                        help_text="10-digit mobile number, unique per shop",
                        max_length=10,
                        null=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                message="Enter a valid 10-digit mobile number.",
                                regex="^[6-9]\\d{9}$",
                            )
                        ],
                    ),
                ),
                (
                    "email",
                    models.EmailField(blank=True, default="", help_text="Optional contact email", max_length=254),
                ),
                (
                    "address",
                    models.CharField(blank=True, default="", help_text="Optional postal address", max_length=255),
                ),
                (
                    "notes",
                    models.CharField(
                        blank=True, default="", help_text="Free-form notes from the shopkeeper", max_length=500
                    ),
                ),
                (
                    "balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Amount owed by the customer (negative means the shop owes)",
                        max_digits=14,
                    ),
                ),
                (
                    "total_credit",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Sum of non-deleted credit entries",
                        max_digits=14,
                    ),
                ),
                (
                    "total_paid",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Sum of non-deleted payment entries",
                        max_digits=14,
                    ),
                ),
                (
                    "credit_limit",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Optional credit limit (informational, not enforced)",
                        max_digits=14,
                        null=True,
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        db_index=True, default=True, help_text="Inactive customers are hidden from listings"
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        help_text="Shop that owns this customer",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="customer_accounts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "customer account",
                "verbose_name_plural": "customer accounts",
                "db_table": "customers_customeraccount",
                "ordering": ["-updated_at"],
                "indexes": [
                    models.Index(fields=["shop", "is_active"], name="customers_c_shop_id_6b1f0e_idx"),
                    models.Index(fields=["shop", "name"], name="customers_c_shop_id_9a2d4c_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("phone__isnull", False)),
                        fields=("shop", "phone"),
                        name="unique_customer_phone_per_shop",
                    )
                ],
            },
        ),
    ]
