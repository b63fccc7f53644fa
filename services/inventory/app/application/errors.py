"""Typed failures raised by the inventory ledger.

Each error carries a stable ``code`` and the HTTP status the API surface
answers with, so callers never have to match on message text.
"""


class LedgerError(Exception):
    """Base exception for ledger errors."""

    status_code = 500
    default_code = "LEDGER_ERROR"
    default_message = "An error occurred in the inventory ledger"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.code}] {self.message}"

    def to_dict(self):
        error_dict = {
            'code': self.code,
            'message': self.message,
        }
        if self.details:
            error_dict['details'] = self.details
        return error_dict


class InvalidQuantity(LedgerError):
    """Quantity missing, not an integer, zero or negative."""

    status_code = 400
    default_code = "INVALID_QUANTITY"
    default_message = "quantity must be a positive integer"

    def __init__(self, quantity=None, message=None):
        super().__init__(message, details={'quantity': quantity})


class ItemNotFound(LedgerError):
    status_code = 404
    default_code = "ITEM_NOT_FOUND"

    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(
            f"Item {item_id} not found in inventory",
            details={'item_id': item_id},
        )


class InsufficientStock(LedgerError):
    """Requested quantity exceeds what is on hand."""

    status_code = 400
    default_code = "INSUFFICIENT_STOCK"

    def __init__(self, item_id, available, requested):
        self.item_id = item_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock: {available} available, {requested} requested",
            details={'item_id': item_id, 'available': available, 'requested': requested},
        )


class InvalidFilter(LedgerError):
    status_code = 400
    default_code = "INVALID_FILTER"
    default_message = "Invalid query parameters"

    def __init__(self, errors, message=None):
        # errors: list of {"field": ..., "message": ...}
        self.errors = errors
        message = message or ", ".join(e['message'] for e in errors) or None
        super().__init__(message, details={'errors': errors})


class InvalidThreshold(InvalidFilter):
    default_code = "INVALID_THRESHOLD"

    def __init__(self, threshold):
        super().__init__(
            [{'field': 'threshold', 'message': 'threshold must be a non-negative integer'}]
        )
        self.details['threshold'] = threshold


class UnsupportedDialect(LedgerError):
    default_code = "UNSUPPORTED_DIALECT"

    def __init__(self, dialect_name):
        super().__init__(
            f"Atomic upsert is not available for the '{dialect_name}' dialect",
            details={'dialect': dialect_name},
        )
