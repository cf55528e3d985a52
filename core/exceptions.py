# core/exceptions.py
"""
Exception hierarchy for the asset ledger.

All errors inherit from AssetLedgerError so callers can catch broad or narrow
as needed. Batch operations (CSV import, QR export, bulk edit) catch the
per-item errors themselves and report success counts instead.
"""


class AssetLedgerError(Exception):
    """Base exception for all asset ledger errors."""


class NotFoundError(AssetLedgerError):
    """Referenced id does not exist in the store."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class DuplicateIdError(AssetLedgerError):
    """Insert with an id that is already taken."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} with id {entity_id} already exists")


class InvalidTransitionError(AssetLedgerError):
    """Lifecycle precondition violated (e.g. borrowing an asset that is not Available)."""


class EncodingError(AssetLedgerError):
    """A single QR code could not be generated."""


class ExternalServiceError(AssetLedgerError):
    """AI collaborator unavailable or failing."""


class AuthenticationError(AssetLedgerError):
    """Admin gate rejected the credentials or the operation."""
