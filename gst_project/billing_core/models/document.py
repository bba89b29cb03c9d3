from decimal import Decimal

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .party import Party


def money_field(**kwargs):
    # Amounts are kept at 4 places, rounding happens in the calculator
    kwargs.setdefault("default", Decimal("0"))
    return models.DecimalField(max_digits=18, decimal_places=4, **kwargs)


def percent_field(**kwargs):
    kwargs.setdefault("default", Decimal("0"))
    return models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        **kwargs,
    )


# ---------- Bill / Challan common header ----------
class BillingDocument(models.Model):
    # Records are visible to and editable by their creator only
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )
    date = models.DateField()

    # Live link, kept only for lookups ("all bills of this party")
    party = models.ForeignKey(
        Party,
        null=True,
        blank=True,
        # the snapshot below keeps the document printable
        on_delete=models.SET_NULL,
        related_name="+",
    )
    # Copy of the party taken at creation time
    party_details = models.JSONField(
        default=dict, blank=True, encoder=DjangoJSONEncoder)

    # Embedded line items: name, hsn, quantity, unit_price, amount
    items = models.JSONField(
        default=list, blank=True, encoder=DjangoJSONEncoder)

    subtotal = money_field()
    discount = percent_field()  # percent
    discount_amount = money_field()
    total = money_field()
    # Whole rupees
    rounded_total = money_field()
    # rounded_total - total, signed
    round_off = money_field()

    notes = models.TextField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Name of the per-owner number field on the concrete model
    number_field = None

    class Meta:
        abstract = True

    @property
    def number(self):
        return getattr(self, self.number_field)

    @property
    def party_state(self):
        return (self.party_details or {}).get("state", "")

    def apply_amounts(self, breakdown):
        """Copy a computed AmountBreakdown onto the matching fields."""
        names = {f.name for f in self._meta.concrete_fields}
        for key, value in breakdown.as_dict().items():
            if key in names:
                setattr(self, key, value)
