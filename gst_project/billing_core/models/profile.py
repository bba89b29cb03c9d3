from django.conf import settings
from django.db import models

from ..validators import validate_gstin, validate_ifsc, validate_mobile
from .address import Address


# ---------- Issuer profile ----------
# The business that issues bills and challans.
# Its state decides whether a bill is interstate.
class BusinessProfile(Address):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="business_profile",
    )
    full_name = models.CharField(max_length=50)
    mobile_no = models.CharField(max_length=10, validators=[validate_mobile])
    company_name = models.CharField(max_length=200)
    gst_owner_name = models.CharField(max_length=100)
    gst_no = models.CharField(max_length=15, validators=[validate_gstin])

    # Printed on invoices, all optional
    bank_name = models.CharField(max_length=100, blank=True)
    account_name = models.CharField(max_length=100, blank=True)
    account_number = models.CharField(max_length=30, blank=True)
    ifsc_code = models.CharField(
        max_length=11, blank=True, validators=[validate_ifsc])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.company_name

    def bank_details(self):
        return {
            "bank_name": self.bank_name,
            "account_name": self.account_name,
            "account_number": self.account_number,
            "ifsc_code": self.ifsc_code,
        }

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
