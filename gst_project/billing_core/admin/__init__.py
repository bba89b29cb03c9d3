from .actions import cancel_bills, convert_challans
from .auditlog import AuditLogAdmin, SequenceCounterAdmin
from .documents import BillAdmin, ChallanAdmin
from .mixins import OwnerAdminMixin
from .party import BusinessProfileAdmin, PartyAdmin
from .readonly import ReadOnlyAdmin
