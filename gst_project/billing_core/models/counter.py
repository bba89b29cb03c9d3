from django.conf import settings
from django.db import models

DOCUMENT_TYPES = [
    ("bill", "Bill"),
    ("challan", "Challan"),
]


# ---------- Sequence counter ----------
# Last issued number per (owner, document type).
# Only ever moves forward, even when documents are deleted.
class SequenceCounter(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sequence_counters",
    )
    document_type = models.CharField(max_length=10, choices=DOCUMENT_TYPES)
    last_number = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            # One counter per owner and document type
            models.UniqueConstraint(
                fields=["owner", "document_type"],
                name="uq_counter_owner_type",
            ),
        ]

    def __str__(self):
        return f"{self.owner} {self.document_type} #{self.last_number}"
