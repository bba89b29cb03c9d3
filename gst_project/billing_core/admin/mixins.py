class OwnerAdminMixin:
    """
    Enforce owner isolation in Django admin.
    Non-superusers only see, pick and save rows they own.
    """
    # Name of the FK to the owning user on the model
    owner_field = "created_by"

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        # If superuser, show everything
        if request.user.is_superuser:
            return qs
        return qs.filter(**{self.owner_field: request.user})

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        """
        Restrict dropdowns (party, source challan) to the user's own rows.
        """
        rel_model = getattr(db_field, "related_model", None)
        if (
            db_field.name != self.owner_field
            and rel_model is not None
            and hasattr(rel_model, "created_by")
            and not request.user.is_superuser
        ):
            kwargs["queryset"] = rel_model.objects.filter(
                created_by=request.user)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        # Only superusers may reassign ownership
        if not request.user.is_superuser and self.owner_field not in fields:
            fields.append(self.owner_field)
        return fields

    def save_model(self, request, obj, form, change):
        # New rows belong to whoever creates them
        if not change and not request.user.is_superuser:
            setattr(obj, self.owner_field, request.user)
        super().save_model(request, obj, form, change)
