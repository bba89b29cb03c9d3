import logging

from celery import shared_task
from django.contrib.auth import get_user_model

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def reconcile_counters(owner_id=None):
    """
    Raise every lagging bill/challan counter to the highest number in use.
    Counters are never lowered. Runs for one owner, or all of them.
    """
    # import lazily to avoid circular imports at module import time
    from .services.numbering import DOCUMENTS, reconcile_counter

    users = get_user_model().objects.all()
    if owner_id is not None:
        users = users.filter(pk=owner_id)

    result = {}
    for user in users:
        for document_type in DOCUMENTS:
            value = reconcile_counter(user, document_type)
            result[f"{user.pk}:{document_type}"] = value
    logger.info("Reconciled %s counters", len(result))
    return result
