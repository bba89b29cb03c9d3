from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from ..exceptions import SequenceAllocationError
from ..services import cancel_bill, convert_challan

# ---------- Admin actions ----------
# Both go through the same services as the API,
# so admins cannot bypass the rules coded there.


@admin.action(description="Cancel selected bills")
def cancel_bills(modeladmin, request, queryset):
    done = 0
    for bill in queryset:
        try:
            cancel_bill(bill, bill.created_by)
            done += 1
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{bill}: {'; '.join(e.messages)}",
                level=messages.ERROR)
    modeladmin.message_user(request, f"Cancelled {done} bill(s).")


@admin.action(description="Convert selected challans to bills")
def convert_challans(modeladmin, request, queryset):
    for challan in queryset:
        try:
            bill, created = convert_challan(challan, challan.created_by)
        except (ValidationError, SequenceAllocationError) as e:
            modeladmin.message_user(
                request, f"{challan}: {e}", level=messages.ERROR)
            continue
        if created:
            modeladmin.message_user(request, f"{challan} → {bill}")
        else:
            modeladmin.message_user(
                request, f"{challan} was already converted to {bill}",
                level=messages.WARNING)
