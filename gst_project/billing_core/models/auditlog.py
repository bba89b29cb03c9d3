from django.conf import settings  # To access global project settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(models.Model):
    # Which user performed the action
    # (Nullable in case the action was automated, e.g. a Celery task)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # Common choices: create, update, delete, convert, payment
    action = models.CharField(max_length=50)
    # e.g. "Bill", "Challan", "Party"
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    # Store details of what changed, in JSON format
    changes = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"],
                         name="audit_user_time_idx"),
            models.Index(fields=["object_type", "object_id"],
                         name="audit_object_idx"),
        ]

    def __str__(self):
        time = self.created_at
        return (
            f"[{time:%Y-%m-%d %H:%M}] {self.user} {self.action} "
            f"{self.object_type}({self.object_id})"
        )
