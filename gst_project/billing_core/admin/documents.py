from django.contrib import admin

from billing_core.models import Bill, Challan

from .actions import cancel_bills, convert_challans
from .mixins import OwnerAdminMixin

# Amounts come from the calculator, never typed in
AMOUNT_FIELDS = (
    "subtotal", "discount_amount", "total", "rounded_total", "round_off",
)


# Register `Bill` model
@admin.register(Bill)
class BillAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "created_by",
        "bill_no",
        "date",
        "party",
        "status",
        "taxable_amount",
        "rounded_total",
    )
    list_filter = ("status", "payment_method", "date")
    actions = [cancel_bills]
    search_fields = ("bill_no", "challan_no", "party__company_name")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("created_by", "party")

    """ Enforce immutability at admin level """

    def get_readonly_fields(self, request, obj=None):
        # Settled or cancelled bills cannot be edited at all
        if obj and obj.status in ("paid", "cancelled"):
            return [f.name for f in self.model._meta.fields]
        fields = list(super().get_readonly_fields(request, obj))
        return fields + list(AMOUNT_FIELDS) + [
            "taxable_amount", "cgst", "sgst", "igst", "status",
        ]

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status == "paid":
            return False  # removes “Delete” option for paid bills
        return super().has_delete_permission(request, obj)


# Register `Challan` model
@admin.register(Challan)
class ChallanAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = (
        "id", "created_by", "challan_no", "date", "party", "rounded_total",
    )
    list_filter = ("date",)
    actions = [convert_challans]
    search_fields = ("challan_no", "party__company_name")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("created_by", "party")

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        return fields + list(AMOUNT_FIELDS)
