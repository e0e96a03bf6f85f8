import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="LedgerEntry",
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
                    "is_deleted",
                    models.BooleanField(
                        db_index=True, default=False, help_text="Whether this record has been soft deleted"
                    ),
                ),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True, help_text="Timestamp when this record was soft deleted", null=True
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
                (
                    "entry_type",
                    models.CharField(
                        choices=[("credit", "Credit"), ("payment", "Payment")],
                        help_text="credit increases the balance, payment decreases it",
                        max_length=16,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2, help_text="Entry amount (always positive)", max_digits=12
                    ),
                ),
                (
                    "balance_after",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Customer balance immediately after this entry was applied",
                        max_digits=14,
                    ),
                ),
                (
                    "occurred_at",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="When the transaction happened (may differ from created_at)",
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("cash", "Cash"),
                            ("upi", "UPI"),
                            ("card", "Card"),
                            ("bank_transfer", "Bank Transfer"),
                            ("cheque", "Cheque"),
                            ("other", "Other"),
                        ],
                        help_text="How the payment was received (payments only)",
                        max_length=16,
                        null=True,
                    ),
                ),
                (
                    "description",
                    models.CharField(blank=True, default="", help_text="Human-readable description", max_length=500),
                ),
                (
                    "bill_number",
                    models.CharField(
                        blank=True, default="", help_text="Optional bill or invoice reference", max_length=50
                    ),
                ),
                (
                    "idempotency_key",
                    models.CharField(
                        blank=True,
                        help_text="Caller-supplied key; repeating it returns the original entry",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "deleted_reason",
                    models.CharField(
                        blank=True, default="", help_text="Reason given when the entry was reversed", max_length=255
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who recorded this entry",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer account this entry applies to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="entries",
                        to="customers.customeraccount",
                    ),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        help_text="Shop that owns this entry",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "ledger entry",
                "verbose_name_plural": "ledger entries",
                "db_table": "ledger_ledgerentry",
                "ordering": ["-occurred_at", "-created_at"],
                "base_manager_name": "all_objects",
                "indexes": [
                    models.Index(fields=["shop", "occurred_at"], name="ledger_ledg_shop_id_3c8e1a_idx"),
                    models.Index(fields=["customer", "occurred_at"], name="ledger_ledg_custome_7f2b9d_idx"),
                    models.Index(fields=["shop", "entry_type"], name="ledger_ledg_shop_id_b41c62_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="ledger_entry_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("entry_type__in", ["credit", "payment"])),
                        name="ledger_entry_type_valid",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("idempotency_key__isnull", False)),
                        fields=("shop", "idempotency_key"),
                        name="unique_ledger_idempotency_key_per_shop",
                    ),
                ],
            },
        ),
    ]
