from django.core.validators import MinValueValidator
from django.db import models

from ..managers import OwnerManager
from .document import BillingDocument


# ---------- Challan ----------
# Delivery document issued before a tax invoice, carries no tax
class Challan(BillingDocument):
    challan_no = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    # Enforce owner scoping
    objects = OwnerManager()

    number_field = "challan_no"

    class Meta:
        ordering = ["challan_no"]
        indexes = [
            models.Index(fields=["created_by", "party"],
                         name="challan_owner_party_idx"),
        ]
        constraints = [
            # Within one owner, each challan number must be unique
            models.UniqueConstraint(
                fields=["created_by", "challan_no"],
                name="uq_challan_owner_number",
            ),
        ]

    def __str__(self):
        return f"Challan {self.challan_no or self.pk}"

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
