from .auditlog import AuditLog
from .bill import Bill
from .challan import Challan
from .counter import SequenceCounter
from .party import Party
from .profile import BusinessProfile
