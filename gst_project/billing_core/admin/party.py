from django.contrib import admin

from billing_core.models import BusinessProfile, Party

from .mixins import OwnerAdminMixin


# Register `Party` model
@admin.register(Party)
class PartyAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = (
        "id", "created_by", "company_name", "gst_no", "mobile_no", "city",
        "state",
    )
    search_fields = ("company_name", "gst_no", "mobile_no")
    list_filter = ("state",)


# Register `BusinessProfile` model
@admin.register(BusinessProfile)
class BusinessProfileAdmin(OwnerAdminMixin, admin.ModelAdmin):
    owner_field = "user"
    list_display = ("id", "user", "company_name", "gst_no", "state")
    search_fields = ("company_name", "gst_no", "user__username")
