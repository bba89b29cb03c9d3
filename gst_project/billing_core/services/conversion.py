import copy
import logging
from dataclasses import dataclass

from django.db import transaction

from ..conf import billing_setting
from ..models import Bill
from .amounts import AmountBreakdown, TaxConfig, compute_amounts
from .audit_helper import log_action
from .documents import check_owner, profile_state
from .numbering import allocate

logger = logging.getLogger(__name__)


@dataclass
class BillDraft:
    """Unsaved invoice derived from a challan."""
    challan_no: str
    source_challan_id: int
    date: object
    party_id: int
    party_details: dict
    items: list
    amounts: AmountBreakdown
    status: str = "pending"
    # Business default for challan-originated trade
    payment_method: str = "cheque"
    notes: str = ""

    def to_bill(self, owner, bill_no):
        bill = Bill(
            created_by=owner,
            bill_no=bill_no,
            challan_no=self.challan_no,
            source_challan_id=self.source_challan_id,
            date=self.date,
            party_id=self.party_id,
            party_details=self.party_details,
            items=self.items,
            status=self.status,
            payment_method=self.payment_method,
            notes=self.notes,
        )
        bill.apply_amounts(self.amounts)
        return bill


def convert_to_invoice(challan, issuer_state, default_gst_rate):
    """
    Derive invoice fields from a challan without touching the database.

    Amounts are recomputed from the challan's items and discount, never
    copied from its total, since a challan was never taxed. The challan
    itself is left untouched.
    """
    party_details = copy.deepcopy(challan.party_details or {})
    items = copy.deepcopy(challan.items or [])
    tax = TaxConfig.for_states(
        default_gst_rate, party_details.get("state", ""), issuer_state)
    amounts = compute_amounts(items, challan.discount, tax)
    return BillDraft(
        challan_no=str(challan.challan_no),
        source_challan_id=challan.pk,
        date=challan.date,
        party_id=challan.party_id,
        party_details=party_details,
        items=items,
        amounts=amounts,
    )


def convert_challan(challan, owner, *, issuer_state=None,
                    default_gst_rate=None):
    """
    Persist the invoice for a challan under a freshly allocated number.

    Returns (bill, created). Converting the same challan again returns
    the bill made the first time, so a retried request cannot issue two
    invoices.
    """
    check_owner(challan, owner)
    existing = (
        Bill.objects.for_owner(owner).filter(source_challan=challan).first()
    )
    if existing is not None:
        logger.info("Challan %s already converted to bill %s",
                    challan.challan_no, existing.bill_no)
        return existing, False

    if issuer_state is None:
        issuer_state = profile_state(owner)
    if default_gst_rate is None:
        default_gst_rate = billing_setting("DEFAULT_CHALLAN_GST_RATE")
    draft = convert_to_invoice(challan, issuer_state, default_gst_rate)

    def build(number):
        bill = draft.to_bill(owner, number)
        bill.save()
        return bill

    with transaction.atomic():
        bill = allocate(owner, "bill", build)
        log_action(
            action="convert",
            instance=bill,
            user=owner,
            changes={"challan_no": challan.challan_no,
                     "bill_no": bill.bill_no,
                     "rounded_total": str(bill.rounded_total)},
        )
    logger.info("Converted challan %s to bill %s for owner=%s",
                challan.challan_no, bill.bill_no, owner.pk)
    return bill, True
