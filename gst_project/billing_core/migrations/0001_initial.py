from decimal import Decimal

import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import billing_core.validators


def address_fields():
    return [
        ("plot_house_no", models.CharField(max_length=100)),
        ("line1", models.CharField(max_length=200)),
        ("area", models.CharField(max_length=100)),
        ("landmark", models.CharField(blank=True, max_length=100)),
        ("city", models.CharField(max_length=100)),
        ("state", models.CharField(max_length=100)),
        ("pincode", models.CharField(
            max_length=6, validators=[billing_core.validators.validate_pincode])),
    ]


def money():
    return models.DecimalField(
        decimal_places=4, default=Decimal("0"), max_digits=18)


def percent():
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0"),
        max_digits=5,
        validators=[
            django.core.validators.MinValueValidator(0),
            django.core.validators.MaxValueValidator(100),
        ],
    )


def document_fields():
    return [
        ("date", models.DateField()),
        ("party_details", models.JSONField(
            blank=True, default=dict,
            encoder=django.core.serializers.json.DjangoJSONEncoder)),
        ("items", models.JSONField(
            blank=True, default=list,
            encoder=django.core.serializers.json.DjangoJSONEncoder)),
        ("subtotal", money()),
        ("discount", percent()),
        ("discount_amount", money()),
        ("total", money()),
        ("rounded_total", money()),
        ("round_off", money()),
        ("notes", models.TextField(blank=True, max_length=500)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("created_by", models.ForeignKey(
            on_delete=django.db.models.deletion.CASCADE,
            related_name="+", to=settings.AUTH_USER_MODEL)),
        ("party", models.ForeignKey(
            blank=True, null=True,
            on_delete=django.db.models.deletion.SET_NULL,
            related_name="+", to="billing_core.party")),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BusinessProfile",
            fields=[
                ("id", models.BigAutoField(
                    auto_created=True, primary_key=True, serialize=False,
                    verbose_name="ID")),
                *address_fields(),
                ("full_name", models.CharField(max_length=50)),
                ("mobile_no", models.CharField(
                    max_length=10,
                    validators=[billing_core.validators.validate_mobile])),
                ("company_name", models.CharField(max_length=200)),
                ("gst_owner_name", models.CharField(max_length=100)),
                ("gst_no", models.CharField(
                    max_length=15,
                    validators=[billing_core.validators.validate_gstin])),
                ("bank_name", models.CharField(blank=True, max_length=100)),
                ("account_name", models.CharField(blank=True, max_length=100)),
                ("account_number", models.CharField(blank=True, max_length=30)),
                ("ifsc_code", models.CharField(
                    blank=True, max_length=11,
                    validators=[billing_core.validators.validate_ifsc])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="business_profile",
                    to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="Party",
            fields=[
                ("id", models.BigAutoField(
                    auto_created=True, primary_key=True, serialize=False,
                    verbose_name="ID")),
                *address_fields(),
                ("full_name", models.CharField(blank=True, max_length=100)),
                ("company_name", models.CharField(max_length=200)),
                ("gst_owner_name", models.CharField(
                    blank=True, max_length=100)),
                ("gst_no", models.CharField(
                    blank=True, max_length=15,
                    validators=[billing_core.validators.validate_gstin])),
                ("mobile_no", models.CharField(
                    max_length=10,
                    validators=[billing_core.validators.validate_mobile])),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="parties", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "parties",
                "indexes": [
                    models.Index(fields=["created_by", "company_name"],
                                 name="party_owner_company_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Challan",
            fields=[
                ("id", models.BigAutoField(
                    auto_created=True, primary_key=True, serialize=False,
                    verbose_name="ID")),
                *document_fields(),
                ("challan_no", models.PositiveIntegerField(
                    validators=[django.core.validators.MinValueValidator(1)])),
            ],
            options={
                "ordering": ["challan_no"],
                "indexes": [
                    models.Index(fields=["created_by", "party"],
                                 name="challan_owner_party_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("created_by", "challan_no"),
                        name="uq_challan_owner_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bill",
            fields=[
                ("id", models.BigAutoField(
                    auto_created=True, primary_key=True, serialize=False,
                    verbose_name="ID")),
                *document_fields(),
                ("bill_no", models.PositiveIntegerField(
                    validators=[django.core.validators.MinValueValidator(1)])),
                ("challan_no", models.CharField(blank=True, max_length=20)),
                ("taxable_amount", money()),
                ("gst_rate", percent()),
                ("cgst", money()),
                ("sgst", money()),
                ("igst", money()),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("paid", "Paid"),
                             ("cancelled", "Cancelled")],
                    default="pending", max_length=10)),
                ("payment_method", models.CharField(
                    choices=[("cash", "Cash"), ("cheque", "Cheque"),
                             ("upi", "UPI"), ("netbanking", "Net Banking")],
                    default="cheque", max_length=12)),
                ("payment_details", models.JSONField(
                    blank=True, null=True,
                    encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("source_challan", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="bills", to="billing_core.challan")),
            ],
            options={
                "ordering": ["bill_no"],
                "indexes": [
                    models.Index(fields=["created_by", "party"],
                                 name="bill_owner_party_idx"),
                    models.Index(fields=["created_by", "status"],
                                 name="bill_owner_status_idx"),
                    models.Index(fields=["created_by", "date"],
                                 name="bill_owner_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("created_by", "bill_no"),
                        name="uq_bill_owner_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SequenceCounter",
            fields=[
                ("id", models.BigAutoField(
                    auto_created=True, primary_key=True, serialize=False,
                    verbose_name="ID")),
                ("document_type", models.CharField(
                    choices=[("bill", "Bill"), ("challan", "Challan")],
                    max_length=10)),
                ("last_number", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="sequence_counters",
                    to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("owner", "document_type"),
                        name="uq_counter_owner_type"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(
                    auto_created=True, primary_key=True, serialize=False,
                    verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(
                    blank=True, null=True,
                    encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user", "created_at"],
                                 name="audit_user_time_idx"),
                    models.Index(fields=["object_type", "object_id"],
                                 name="audit_object_idx"),
                ],
            },
        ),
    ]
