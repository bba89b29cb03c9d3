"""
Per-owner running numbers for bills and challans.

The counter row for (owner, document_type) stores the last issued
number. A document and the counter advance are written in the same
database transaction; the advance is a conditional UPDATE on the value
that was read (compare-and-swap), so two sessions that read the same
value cannot both commit. The loser rolls back and retries with a fresh
read. Numbers are never handed out without their document being
persisted, and the counter never moves backwards.
"""
import logging
import time
from collections import namedtuple

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Max
from django.utils import timezone

from ..conf import billing_setting
from ..exceptions import (AllocationTimeout, NumberConflictError,
                          SequenceAllocationError)
from ..models import Bill, Challan, SequenceCounter

logger = logging.getLogger(__name__)

# document_type -> (model, number field, label used in messages)
DOCUMENTS = {
    "bill": (Bill, "bill_no", "Bill"),
    "challan": (Challan, "challan_no", "Challan"),
}

NextNumber = namedtuple("NextNumber", ["number", "fallback", "warning"])


class _CounterMoved(Exception):
    """Another session advanced the counter after we read it."""


def _document_info(document_type):
    try:
        return DOCUMENTS[document_type]
    except KeyError:
        raise ValueError(f"Unknown document type: {document_type!r}")


def next_number(owner, document_type):
    """
    Provisional next number, for display before a document is saved.

    If the counter cannot be read the sequence is assumed to start at 1
    so the form is never blocked; the caller gets the warning to show.
    allocate() re-reads the counter at save time anyway.
    """
    _document_info(document_type)
    try:
        last = (
            SequenceCounter.objects.filter(
                owner=owner, document_type=document_type)
            .values_list("last_number", flat=True)
            .first()
        )
    except DatabaseError as exc:
        warning = (
            f"Could not read the {document_type} counter ({exc}); "
            "numbering shown from 1"
        )
        logger.warning("next_number fallback for owner=%s type=%s: %s",
                       getattr(owner, "pk", owner), document_type, exc)
        return NextNumber(1, True, warning)
    return NextNumber((last or 0) + 1, False, None)


def _get_counter(owner, document_type):
    # Lock the row until the surrounding transaction finishes
    # (a no-op on sqlite, which serializes writers anyway)
    counter, _ = SequenceCounter.objects.select_for_update().get_or_create(
        owner=owner, document_type=document_type)
    return counter


def _compare_and_set(counter_pk, expected, new_value):
    """Advance the counter only if it still holds `expected`."""
    updated = SequenceCounter.objects.filter(
        pk=counter_pk, last_number=expected
    ).update(last_number=new_value, updated_at=timezone.now())
    return updated == 1


def commit(owner, document_type, number):
    """
    Advance the counter to `number` if it is ahead of the stored value.
    Numbers at or below the stored value leave the counter untouched.
    Returns the stored value.
    Call inside the transaction that writes the document.
    """
    _document_info(document_type)
    with transaction.atomic():
        counter = _get_counter(owner, document_type)
        if number <= counter.last_number:
            return counter.last_number
        if not _compare_and_set(counter.pk, counter.last_number, number):
            raise SequenceAllocationError(
                f"{document_type} counter changed during commit")
        return number


def ensure_number_available(owner, document_type, number, exclude=None):
    """Raise NumberConflictError if the owner already uses `number`."""
    model, field, label = _document_info(document_type)
    qs = model.objects.numbered(owner, field, number)
    if exclude is not None and exclude.pk:
        qs = qs.exclude(pk=exclude.pk)
    if qs.exists():
        raise NumberConflictError(label, number)


def _taken_from(owner, model, field, start):
    return set(
        model.objects.for_owner(owner)
        .filter(**{f"{field}__gte": start})
        .values_list(field, flat=True)
    )


def allocate(owner, document_type, create, *, timeout=None,
             max_attempts=None):
    """
    Allocate the next number and persist the document with it.

    `create(number)` must save and return the document. It runs inside
    the allocation transaction: if it raises, nothing is written and
    the number stays free.
    """
    model, field, label = _document_info(document_type)
    if max_attempts is None:
        max_attempts = billing_setting("ALLOCATION_MAX_ATTEMPTS")
    if timeout is None:
        timeout = billing_setting("ALLOCATION_TIMEOUT")
    deadline = time.monotonic() + timeout if timeout else None

    def check_deadline():
        if deadline is not None and time.monotonic() > deadline:
            raise AllocationTimeout(
                f"{label} number allocation timed out after {timeout}s")

    for attempt in range(1, max_attempts + 1):
        check_deadline()
        try:
            with transaction.atomic():
                counter = _get_counter(owner, document_type)
                observed = counter.last_number
                number = observed + 1
                # Skip numbers already used by manually numbered documents
                taken = _taken_from(owner, model, field, number)
                while number in taken:
                    number += 1

                document = create(number)

                # Raising here rolls the document back as well
                check_deadline()
                if not _compare_and_set(counter.pk, observed, number):
                    raise _CounterMoved()
        except _CounterMoved:
            logger.info("%s counter moved for owner=%s, retry %s/%s",
                        label, getattr(owner, "pk", owner), attempt,
                        max_attempts)
            continue
        except IntegrityError as exc:
            # A concurrent session took the number or created the counter
            logger.info("%s allocation conflict for owner=%s (%s), "
                        "retry %s/%s", label, getattr(owner, "pk", owner),
                        exc, attempt, max_attempts)
            continue
        logger.debug("Allocated %s %s for owner=%s", label, number,
                     getattr(owner, "pk", owner))
        return document

    raise SequenceAllocationError(
        f"Could not allocate a {label.lower()} number after "
        f"{max_attempts} attempts")


def create_with_number(owner, document_type, number, create):
    """
    Persist a document under an explicitly supplied number.
    Collisions are reported, never overwritten.
    """
    model, field, label = _document_info(document_type)
    try:
        with transaction.atomic():
            ensure_number_available(owner, document_type, number)
            document = create(number)
            commit(owner, document_type, number)
    except IntegrityError:
        raise NumberConflictError(label, number)
    return document


def reconcile_counter(owner, document_type):
    """
    Raise a lagging counter to the highest issued number.
    Never lowers it. Returns the stored value.
    """
    model, field, label = _document_info(document_type)
    highest = (
        model.objects.for_owner(owner).aggregate(top=Max(field))["top"] or 0
    )
    return commit(owner, document_type, highest)
