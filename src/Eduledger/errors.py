"""Exception taxonomy for the store and ledger layer.

Every operation propagates these to the caller; nothing here is retried.
"""


class EduledgerError(Exception):
    """Base class for all errors raised by the store and ledger."""


class StorageError(EduledgerError):
    """The data file could not be read or written (missing, moved, I/O failure)."""


class StoragePermissionError(StorageError, PermissionError):
    """Access to the data file was denied or revoked.

    The message is meant to be shown to the user as-is.
    """


class ParseError(StorageError, ValueError):
    """Persisted content is not valid JSON or not a JSON object."""


class DuplicateIdError(EduledgerError):
    def __init__(self, collection, record_id):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"An item with ID {record_id!r} already exists in {collection}.")


class NotFoundError(EduledgerError, LookupError):
    def __init__(self, collection, record_id):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Document with id {record_id!r} not found in collection {collection}.")


class InvalidTransitionError(EduledgerError):
    def __init__(self, invoice_id, current, requested):
        self.invoice_id = invoice_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invoice {invoice_id!r} cannot move from {current} to {requested}."
        )


class InvalidRoleError(EduledgerError, ValueError):
    def __init__(self, role):
        self.role = role
        super().__init__(f"Role {role!r} has no user records; cannot update its password.")
