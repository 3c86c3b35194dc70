"""Domain-specific exceptions"""

from decimal import Decimal


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is malformed or outside the allowed range"""

    pass


class ParseError(ValidationError):
    """Period or date text could not be understood"""

    pass


class NotFoundError(DomainException):
    """Member or loan does not exist"""

    pass


class BusinessRuleError(DomainException):
    """Operation rejected by a ledger rule; carries a machine-readable reason"""

    reason = "business_rule"


class UnpaidInterestError(BusinessRuleError):
    """Principal cannot be settled while interest is outstanding"""

    reason = "unpaid_interest"

    def __init__(self, interest_due: Decimal):
        super().__init__(f"Interest of {interest_due} must be paid before the principal")
        self.interest_due = interest_due


class AlreadyPaidError(BusinessRuleError):
    """Loan principal was already marked paid"""

    reason = "already_paid"


class AlreadyClosedError(BusinessRuleError):
    """Loan is closed and accepts no further payments"""

    reason = "already_closed"


class NoInterestDueError(BusinessRuleError):
    """Nothing has accrued since the last interest settlement"""

    reason = "no_interest_due"


class StorageError(DomainException):
    """Persistence layer failed"""

    pass
