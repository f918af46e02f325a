"""Error kinds raised by the ledger components."""


class LedgerError(Exception):
    """Base class for ledger failures."""


class ValidationError(LedgerError):
    """Malformed or contradictory input (bad installment count, foreign quote, ...)."""


class NotFoundError(LedgerError):
    """A referenced project, payment, installment, item or quote does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class StoreError(LedgerError):
    """The ledger store failed to read or write."""
