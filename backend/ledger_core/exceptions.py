class LedgerError(Exception):
    """Base for every rejection raised by the ledger services.

    Carries a machine readable ``kind``, the HTTP-equivalent ``status_code``
    and a ``detail`` dict (offending field, value, current state...) so any
    transport can render a precise message.
    """

    kind = "ledger_error"
    status_code = 400

    def __init__(self, message, **detail):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def as_dict(self):
        data = {"kind": self.kind, "message": self.message}
        # Decimals / dates become strings so the dict is JSON safe
        data.update({key: str(value) if value is not None else None
                     for key, value in self.detail.items()})
        return data


class InvalidInputError(LedgerError):
    """Malformed or missing input, rejected before touching the database."""
    kind = "validation_error"


class NotFoundError(LedgerError):
    """Referenced record does not exist or is inactive in this company."""
    kind = "not_found"
    status_code = 404


class IllegalTransitionError(LedgerError):
    """Requested status change is not allowed from the current status."""
    kind = "illegal_transition"

    def __init__(self, message, *, current, attempted, **detail):
        super().__init__(message, current=current, attempted=attempted, **detail)
        self.current = current
        self.attempted = attempted


class InsufficientBalanceError(LedgerError):
    """Resulting balance would drop below zero."""
    kind = "insufficient_balance"


class InsufficientStockError(InsufficientBalanceError):
    kind = "insufficient_stock"


class ExceedsBalanceError(LedgerError):
    """Payment larger than the document's balance due."""
    kind = "exceeds_balance"


class LimitExceededError(LedgerError):
    """Petty cash replenishment above the account's max limit."""
    kind = "limit_exceeded"


class PersistenceError(LedgerError):
    """The atomic unit failed in the database; nothing was committed."""
    kind = "persistence_error"
    status_code = 500
