"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvoiceNotFoundError(DomainException):
    """Invoice does not exist or belongs to another user"""

    pass


class ClientNotFoundError(DomainException):
    """Client does not exist or belongs to another user"""

    pass


class PaymentNotFoundError(DomainException):
    """Payment does not exist or its invoice belongs to another user"""

    pass


class ClientInUseError(DomainException):
    """Client still has invoices and cannot be deleted"""

    pass
