from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import Bill, Challan, Party
from .services.audit_helper import log_action

"""Record every deleted bill, challan and party in the audit log."""


def _deleted_directly(instance, origin):
    # Rows removed by a cascade from their owner's deletion are not logged:
    # the owner row is gone by commit time
    if origin is None or origin is instance:
        return True
    return getattr(origin, "model", None) is type(instance)


@receiver(post_delete, sender=Bill)
def bill_deleted(sender, instance, origin=None, **kwargs):
    if not _deleted_directly(instance, origin):
        return
    # The counter is not touched: deleted numbers are never reissued
    log_action(action="delete", instance=instance,
               changes={"bill_no": instance.bill_no,
                        "status": instance.status})


@receiver(post_delete, sender=Challan)
def challan_deleted(sender, instance, origin=None, **kwargs):
    if not _deleted_directly(instance, origin):
        return
    log_action(action="delete", instance=instance,
               changes={"challan_no": instance.challan_no})


@receiver(post_delete, sender=Party)
def party_deleted(sender, instance, origin=None, **kwargs):
    if not _deleted_directly(instance, origin):
        return
    log_action(action="delete", instance=instance,
               changes={"company_name": instance.company_name})
