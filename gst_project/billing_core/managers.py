from django.db import models

# -----------------------------------------
# Enforce owner scoping across all models
# created by a user
# -----------------------------------------
# Define subclass of Django’s QuerySet
class OwnerQuerySet(models.QuerySet):
    def for_owner(self, owner):            # Add queryset helper
        return self.filter(created_by=owner)  # Apply filter

    def numbered(self, owner, number_field, number):
        # Lookup by business key, e.g. ("bill_no", 12)
        return self.for_owner(owner).filter(**{number_field: number})


# Attach OwnerQuerySet to .objects
class OwnerManager(models.Manager):

    def get_queryset(self):  # every model gets OwnerQuerySet
        return OwnerQuerySet(self.model, using=self._db)

    def for_owner(self, owner):  # can call for_owner() directly on objects
        return self.get_queryset().for_owner(owner)

    # every model using OwnerManager can call:
    # Bill.objects.for_owner(request.owner)


class BillQuerySet(OwnerQuerySet):
    def pending(self):
        return self.filter(status="pending")

    def paid(self):
        return self.filter(status="paid")

    def between(self, start=None, end=None):
        # Either side of the date range may be open
        qs = self
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)
        return qs


class BillManager(OwnerManager):
    def get_queryset(self):
        return BillQuerySet(self.model, using=self._db)
