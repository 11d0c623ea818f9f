"""
Exceptions raised by stockledger.

 - StockLedgerError: base class for everything below
 - InvalidParameter: malformed generator configuration or movement data
 - UnknownEntity: entity not present in an explicit registry
"""


class StockLedgerError(Exception):
    """Base exception for stockledger."""


class InvalidParameter(StockLedgerError, ValueError):
    """Raised before any output is produced when inputs cannot be honoured."""


class UnknownEntity(StockLedgerError, KeyError):
    """Raised when an entity is not part of the registry a ledger was built with."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(entity_id)

    def __str__(self) -> str:
        return f"unknown entity: {self.entity_id!r}"
