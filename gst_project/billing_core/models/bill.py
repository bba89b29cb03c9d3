from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator
from django.db import models

from ..exceptions import InvalidTransitionError
from ..managers import BillManager
from .challan import Challan
from .document import BillingDocument, money_field, percent_field

BILL_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("paid", "Paid"),
    ("cancelled", "Cancelled"),
]

PAYMENT_METHODS = [
    ("cash", "Cash"),
    ("cheque", "Cheque"),
    ("upi", "UPI"),
    ("netbanking", "Net Banking"),
]

# Current state vs. allowed next states
ALLOWED_TRANSITIONS = {
    "pending": ["paid", "cancelled"],
    "paid": ["pending"],
    "cancelled": [],  # "cancelled" → (no further transitions)
}


# ---------- Bill (GST tax invoice) ----------
class Bill(BillingDocument):
    bill_no = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    # Party's challan reference printed on the invoice (free text)
    challan_no = models.CharField(max_length=20, blank=True)
    # Set when the bill was produced by converting one of our challans
    source_challan = models.ForeignKey(
        Challan,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="bills",
    )

    taxable_amount = money_field()
    gst_rate = percent_field()
    cgst = money_field()
    sgst = money_field()
    igst = money_field()

    status = models.CharField(
        max_length=10, choices=BILL_STATUS_CHOICES, default="pending")
    payment_method = models.CharField(
        max_length=12, choices=PAYMENT_METHODS, default="cheque")
    # Filled when a payment is recorded, cleared when it is deleted
    payment_details = models.JSONField(
        null=True, blank=True, encoder=DjangoJSONEncoder)

    # Enforce owner scoping
    objects = BillManager()

    number_field = "bill_no"

    class Meta:
        ordering = ["bill_no"]
        indexes = [
            models.Index(fields=["created_by", "party"],
                         name="bill_owner_party_idx"),
            models.Index(fields=["created_by", "status"],
                         name="bill_owner_status_idx"),
            models.Index(fields=["created_by", "date"],
                         name="bill_owner_date_idx"),
        ]
        constraints = [
            # Within one owner, each bill number must be unique
            # Across owners, duplicates are allowed
            models.UniqueConstraint(
                fields=["created_by", "bill_no"],
                name="uq_bill_owner_number",
            ),
        ]

    def __str__(self):
        # If no bill number, fall back to database ID
        return f"Bill {self.bill_no or self.pk}"

    @property
    def is_interstate(self):
        return self.igst > 0

    def clean(self):
        """Settled and cancelled bills keep their number and amounts."""
        if self.pk and self.status in ("paid", "cancelled"):
            orig = Bill.objects.filter(pk=self.pk).first()
            if orig is None:
                return
            changed_fields = []
            for field in ["bill_no", "created_by_id", "taxable_amount",
                          "rounded_total"]:
                # Check for edits
                if getattr(orig, field) != getattr(self, field):
                    changed_fields.append(field)
            if changed_fields:
                raise ValidationError(
                    f"Cannot modify {changed_fields} on a {self.status} bill."
                )

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

    def transition_to(self, new_status, save=True):
        # Look up what states are allowed from current self.status
        if new_status not in ALLOWED_TRANSITIONS.get(self.status, []):
            # If requested new_status isn’t allowed → block it
            raise InvalidTransitionError(
                f"Cannot go from {self.status} to {new_status}")

        # If valid, update self.status and persist with .save()
        self.status = new_status
        if save:
            self.save()
