from django.core.exceptions import ValidationError


class NumberConflictError(ValidationError):
    """Raised when a bill/challan number is already used by the same owner."""

    def __init__(self, label, number):
        self.number = number
        super().__init__(f"{label} number {number} already exists")


class InvalidTransitionError(ValidationError):
    """Raised when a bill is moved to a status its current one does not allow."""
    pass


class SequenceAllocationError(Exception):
    """Raised when a number could not be allocated within the retry budget."""
    pass


class AllocationTimeout(SequenceAllocationError):
    """Raised when allocation did not finish before its deadline.
    Nothing is persisted, so the number is not consumed."""
    pass
