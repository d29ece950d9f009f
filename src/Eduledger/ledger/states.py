from Eduledger.core.constants import InvoiceStatus
from Eduledger.errors import InvalidTransitionError

ALLOWED_TRANSITIONS = {
    InvoiceStatus.UNPAID: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED},
    InvoiceStatus.PAID: set(),
    InvoiceStatus.CANCELLED: set(),
}


def check_transition(invoice, requested):
    """Raise InvalidTransitionError unless ``invoice`` may move to ``requested``."""
    current = InvoiceStatus(invoice["status"])
    requested = InvoiceStatus(requested)
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(invoice["id"], current.value, requested.value)
