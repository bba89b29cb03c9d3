from django.conf import settings
from django.db import models

from ..managers import OwnerManager
from ..validators import validate_gstin, validate_mobile
from .address import Address


# ---------- Party ----------
# Represents a customer who receives bills and challans
class Party(Address):
    # Every party belongs to the user who created it
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="parties",
    )

    full_name = models.CharField(max_length=100, blank=True)
    company_name = models.CharField(max_length=200)
    gst_owner_name = models.CharField(max_length=100, blank=True)
    # Format-checked only, never verified against the GST registry
    gst_no = models.CharField(
        max_length=15, blank=True, validators=[validate_gstin])
    mobile_no = models.CharField(max_length=10, validators=[validate_mobile])
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce owner scoping
    objects = OwnerManager()

    class Meta:
        verbose_name_plural = "parties"
        indexes = [
            models.Index(fields=["created_by", "company_name"],
                         name="party_owner_company_idx"),
        ]

    def __str__(self):
        return self.company_name

    def snapshot(self):
        """
        Copy embedded into a bill or challan at creation time.
        Later edits to the party never change issued documents.
        """
        data = {
            "id": self.pk,
            "company_name": self.company_name,
            "full_name": self.full_name,
            "gst_owner_name": self.gst_owner_name,
            "gst_no": self.gst_no,
            "mobile_no": self.mobile_no,
            "email": self.email,
        }
        data.update(self.address_dict())
        return data

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
