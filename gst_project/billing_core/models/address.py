from django.db import models

from ..validators import validate_pincode

ADDRESS_FIELDS = (
    "plot_house_no", "line1", "area", "landmark", "city", "state", "pincode"
)


# ---------- Postal address (abstract) ----------
# Shared by the issuer's BusinessProfile and every Party
class Address(models.Model):
    plot_house_no = models.CharField(max_length=100)
    line1 = models.CharField(max_length=200)
    area = models.CharField(max_length=100)
    landmark = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=100)
    # Drives interstate vs. intrastate tax selection
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6, validators=[validate_pincode])

    class Meta:
        abstract = True

    def address_dict(self):
        return {name: getattr(self, name) for name in ADDRESS_FIELDS}

    def formatted_address(self):
        return format_address(self.address_dict())


def format_address(address):
    """Join the non-empty address parts with ", "; "N/A" when nothing is set."""
    if not isinstance(address, dict):
        return "N/A"
    parts = [address.get(name) for name in ADDRESS_FIELDS]
    joined = ", ".join(str(p) for p in parts if p)
    return joined or "N/A"
