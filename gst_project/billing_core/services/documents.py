import logging
from decimal import Decimal

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Sum

from ..models import Bill, BusinessProfile, Challan
from .amounts import TaxConfig, compute_amounts, to_line_items
from .audit_helper import log_action
from .numbering import (allocate, commit, create_with_number,
                        ensure_number_available)

logger = logging.getLogger(__name__)


def check_owner(document, owner):
    # Records are only visible to / editable by their creator
    if document.created_by_id != getattr(owner, "pk", None):
        raise PermissionDenied(f"{document} belongs to another user")


def profile_state(owner):
    """State of the issuing business, "" when no profile is set up."""
    try:
        return owner.business_profile.state
    except BusinessProfile.DoesNotExist:
        return ""


def _line_items(items):
    return [item.as_dict() for item in to_line_items(items)]


# ----------------------------
# Bill workflows
# ----------------------------
def bill_amounts(owner, party, items, discount, gst_rate):
    tax = TaxConfig.for_states(gst_rate, party.state, profile_state(owner))
    return compute_amounts(items, discount, tax)


def create_bill(owner, data):
    """
    Create a bill from validated form data.

    The number is allocated from the owner's sequence unless the data
    carries an explicit `bill_no`, which is then checked for collisions.
    """
    party = data["party"]
    if party.created_by_id != owner.pk:
        raise ValidationError({"party": "Party not found"})
    breakdown = bill_amounts(
        owner, party, data["items"], data.get("discount"), data["gst_rate"])

    def build(number):
        bill = Bill(
            created_by=owner,
            bill_no=number,
            challan_no=data.get("challan_no") or "",
            date=data["date"],
            party=party,
            party_details=party.snapshot(),
            items=_line_items(data["items"]),
            payment_method=data.get("payment_method") or "cheque",
            notes=data.get("notes") or "",
        )
        bill.apply_amounts(breakdown)
        bill.save()
        return bill

    with transaction.atomic():
        if data.get("bill_no"):
            bill = create_with_number(owner, "bill", data["bill_no"], build)
        else:
            bill = allocate(owner, "bill", build)
        log_action(
            action="create",
            instance=bill,
            user=owner,
            changes={"bill_no": bill.bill_no,
                     "rounded_total": str(bill.rounded_total)},
        )
    logger.info("Created bill %s for owner=%s", bill.bill_no, owner.pk)
    return bill


def update_bill(bill, owner, data):
    """Explicit edit: amounts and the party snapshot are recomputed."""
    check_owner(bill, owner)
    if bill.status != "pending":
        raise ValidationError(
            f"Cannot edit a {bill.status} bill."
            + (" Delete its payment first." if bill.status == "paid" else "")
        )
    party = data["party"]
    if party.created_by_id != owner.pk:
        raise ValidationError({"party": "Party not found"})

    with transaction.atomic():
        new_number = data.get("bill_no") or bill.bill_no
        if new_number != bill.bill_no:
            ensure_number_available(owner, "bill", new_number, exclude=bill)
            bill.bill_no = new_number
            commit(owner, "bill", new_number)

        breakdown = bill_amounts(
            owner, party, data["items"], data.get("discount"),
            data["gst_rate"])
        bill.challan_no = data.get("challan_no") or ""
        bill.date = data["date"]
        bill.party = party
        bill.party_details = party.snapshot()
        bill.items = _line_items(data["items"])
        bill.payment_method = data.get("payment_method") or bill.payment_method
        bill.notes = data.get("notes") or ""
        bill.apply_amounts(breakdown)
        bill.save()
        log_action(
            action="update",
            instance=bill,
            user=owner,
            changes={"bill_no": bill.bill_no,
                     "rounded_total": str(bill.rounded_total)},
        )
    return bill


def cancel_bill(bill, owner):
    check_owner(bill, owner)
    with transaction.atomic():
        bill.transition_to("cancelled")
        log_action(action="cancel", instance=bill, user=owner,
                   changes={"status": bill.status})
    return bill


def delete_bill(bill, owner):
    """Delete directly; the bill counter is left where it is."""
    check_owner(bill, owner)
    bill.delete()


def filter_bills(owner, party=None, start=None, end=None, status=None):
    qs = Bill.objects.for_owner(owner).between(start, end)
    if party is not None:
        qs = qs.filter(party=party)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("bill_no")


def party_bill_summary(owner, party):
    """Sum of bill totals for one party: all, paid and pending."""
    bills = Bill.objects.for_owner(owner).filter(party=party)

    def total_of(qs):
        return qs.aggregate(s=Sum("rounded_total"))["s"] or Decimal("0")

    return {
        "count": bills.count(),
        "total": total_of(bills),
        "paid": total_of(bills.paid()),
        "pending": total_of(bills.pending()),
    }


# ----------------------------
# Challan workflows
# ----------------------------
def create_challan(owner, data):
    party = data["party"]
    if party.created_by_id != owner.pk:
        raise ValidationError({"party": "Party not found"})
    # Challans carry no tax
    breakdown = compute_amounts(data["items"], data.get("discount"))

    def build(number):
        challan = Challan(
            created_by=owner,
            challan_no=number,
            date=data["date"],
            party=party,
            party_details=party.snapshot(),
            items=_line_items(data["items"]),
            notes=data.get("notes") or "",
        )
        challan.apply_amounts(breakdown)
        challan.save()
        return challan

    with transaction.atomic():
        if data.get("challan_no"):
            challan = create_with_number(
                owner, "challan", data["challan_no"], build)
        else:
            challan = allocate(owner, "challan", build)
        log_action(
            action="create",
            instance=challan,
            user=owner,
            changes={"challan_no": challan.challan_no,
                     "rounded_total": str(challan.rounded_total)},
        )
    logger.info("Created challan %s for owner=%s", challan.challan_no,
                owner.pk)
    return challan


def update_challan(challan, owner, data):
    check_owner(challan, owner)
    party = data["party"]
    if party.created_by_id != owner.pk:
        raise ValidationError({"party": "Party not found"})

    with transaction.atomic():
        new_number = data.get("challan_no") or challan.challan_no
        if new_number != challan.challan_no:
            ensure_number_available(
                owner, "challan", new_number, exclude=challan)
            challan.challan_no = new_number
            commit(owner, "challan", new_number)

        breakdown = compute_amounts(data["items"], data.get("discount"))
        challan.date = data["date"]
        challan.party = party
        challan.party_details = party.snapshot()
        challan.items = _line_items(data["items"])
        challan.notes = data.get("notes") or ""
        challan.apply_amounts(breakdown)
        challan.save()
        log_action(
            action="update",
            instance=challan,
            user=owner,
            changes={"challan_no": challan.challan_no,
                     "rounded_total": str(challan.rounded_total)},
        )
    return challan


def delete_challan(challan, owner):
    check_owner(challan, owner)
    challan.delete()
