from django.contrib import admin

from billing_core.models import AuditLog, SequenceCounter

from .mixins import OwnerAdminMixin
from .readonly import ReadOnlyAdmin


# Register `AuditLog` model
@admin.register(AuditLog)
class AuditLogAdmin(OwnerAdminMixin, ReadOnlyAdmin):
    owner_field = "user"
    list_display = (
        "id",
        "user",
        "action",
        "object_type",
        "object_id",
        "created_at",
    )
    search_fields = ("object_type", "object_id", "user__username")
    list_filter = ("action", "object_type", "created_at")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("user")


# Counters only move through allocation and reconciliation
@admin.register(SequenceCounter)
class SequenceCounterAdmin(OwnerAdminMixin, ReadOnlyAdmin):
    owner_field = "owner"
    list_display = ("id", "owner", "document_type", "last_number",
                    "updated_at")
    list_filter = ("document_type",)
