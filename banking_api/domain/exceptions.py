"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class StorageFailure(DomainException):
    """Ledger store could not complete a read or the atomic commit"""

    pass


class DuplicateAccountError(DomainException):
    """An account with this number already exists in the store"""

    def __init__(self, account_number: str):
        super().__init__(f"Account number already in use: {account_number}")
        self.account_number = account_number


class InvalidLimitPolicyError(DomainException):
    """Limit thresholds are missing or not positive"""

    pass
