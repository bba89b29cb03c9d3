from .amounts import (AmountBreakdown, LineItem, TaxConfig, compute_amounts,
                      is_interstate)
from .conversion import BillDraft, convert_challan, convert_to_invoice
from .documents import (cancel_bill, create_bill, create_challan, delete_bill,
                        delete_challan, filter_bills, party_bill_summary,
                        update_bill, update_challan)
from .numbering import (allocate, commit, ensure_number_available,
                        next_number, reconcile_counter)
from .parsing import parse_non_negative_number
from .payment import (delete_payment, payment_summary, record_payment,
                      record_payments)
from .words import to_words
