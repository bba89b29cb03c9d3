import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidTransitionError
from ..models import Bill
from .amounts import quantize_amount
from .audit_helper import log_action
from .documents import check_owner
from .parsing import coerce_decimal, percent_of

logger = logging.getLogger(__name__)

# Extra fields stored for each payment method
METHOD_FIELDS = {
    "cash": (),
    "cheque": ("cheque_no", "bank"),
    "upi": ("upi_id", "upi_name", "bank"),
    "netbanking": ("rtgs_neft", "bank"),
}


def build_payment_details(data):
    """
    Turn validated payment form data into the stored payment record.

    Deductions are computed from the taxable amount:
        tds_amount         = taxable x tds% (always 0 for cash)
        other_claim_amount = the given amount, else taxable x other_claim%
        brokerage_amount   = taxable x brokerage%
    """
    method = data["method"]
    taxable = coerce_decimal(data.get("taxable_amount"))

    tds = Decimal("0") if method == "cash" else coerce_decimal(data.get("tds"))
    other_claim_pct = coerce_decimal(data.get("other_claim_percentage"))
    given_claim = data.get("other_claim_amount")
    if given_claim in (None, ""):
        other_claim_amount = percent_of(taxable, other_claim_pct)
    else:
        other_claim_amount = coerce_decimal(given_claim)
    brokerage_pct = coerce_decimal(data.get("brokerage_percentage"))

    details = {
        "method": method,
        "date": (data.get("date") or timezone.now()).isoformat(),
        "amount": quantize_amount(coerce_decimal(data.get("amount"))),
        "taxable_amount": quantize_amount(taxable),
        "tds": tds,
        "tds_amount": quantize_amount(percent_of(taxable, tds)),
        "other_claim_percentage": other_claim_pct,
        "other_claim_amount": quantize_amount(other_claim_amount),
        "broker_name": data.get("broker_name") or "",
        "broker_phone": data.get("broker_phone") or "",
        "brokerage_percentage": brokerage_pct,
        "brokerage_amount": quantize_amount(
            percent_of(taxable, brokerage_pct)),
    }
    for name in METHOD_FIELDS[method]:
        details[name] = data.get(name) or ""
    return details


def record_payment(bill, owner, data):
    """
    Attach a payment to a bill and move it pending → paid.
    Recording again on a paid bill replaces the stored payment.
    """
    check_owner(bill, owner)
    with transaction.atomic():
        # Lock the bill row until the transaction finishes
        bill = Bill.objects.select_for_update().get(pk=bill.pk)
        details = build_payment_details(data)
        was_paid = bill.status == "paid"
        if not was_paid:
            bill.transition_to("paid", save=False)
        bill.payment_details = details
        bill.payment_method = details["method"]
        bill.save()

        log_action(
            action="update_payment" if was_paid else "payment",
            instance=bill,
            user=owner,
            changes={
                "method": details["method"],
                "amount": str(details["amount"]),
                "status": bill.status,
            },
        )
    logger.info("Recorded %s payment on bill %s for owner=%s",
                details["method"], bill.bill_no, owner.pk)
    return bill


def delete_payment(bill, owner):
    """Remove the payment of a paid bill, moving it back to pending."""
    check_owner(bill, owner)
    with transaction.atomic():
        bill = Bill.objects.select_for_update().get(pk=bill.pk)
        if bill.status != "paid":
            raise InvalidTransitionError(
                f"Bill {bill.bill_no} has no payment to delete")
        bill.transition_to("pending", save=False)
        bill.payment_details = None
        bill.save()
        log_action(action="delete_payment", instance=bill, user=owner,
                   changes={"status": bill.status})
    return bill


def record_payments(bills, owner, data):
    """
    Settle several bills with one payment template, all or nothing.
    Each bill is paid its own rounded total on its own taxable amount.
    """
    results = []
    with transaction.atomic():
        for bill in bills:
            per_bill = dict(data)
            per_bill["amount"] = bill.rounded_total
            per_bill["taxable_amount"] = bill.taxable_amount
            # other_claim_amount is per bill, fall back to the percentage
            per_bill.pop("other_claim_amount", None)
            results.append(record_payment(bill, owner, per_bill))
    return results


def payment_summary(bills):
    """Totals shown above a party's payment list."""
    summary = {
        "total": Decimal("0"),
        "paid": Decimal("0"),
        "total_tds": Decimal("0"),
        "total_other_claim": Decimal("0"),
        "total_brokerage": Decimal("0"),
    }
    for bill in bills:
        summary["total"] += coerce_decimal(bill.rounded_total)
        details = bill.payment_details or {}
        if not details:
            continue
        summary["paid"] += coerce_decimal(details.get("amount"))
        summary["total_tds"] += coerce_decimal(details.get("tds_amount"))
        summary["total_other_claim"] += coerce_decimal(
            details.get("other_claim_amount"))
        summary["total_brokerage"] += coerce_decimal(
            details.get("brokerage_amount"))
    return summary
