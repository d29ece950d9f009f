import logging

from Eduledger.core.constants import AdjustmentType, TransactionType
from Eduledger.core.utils import generate_unique_id
from Eduledger.data.store import find_by_id
from Eduledger.errors import NotFoundError
from Eduledger.ledger.balances import apply_balance_delta

logger = logging.getLogger(__name__)


def add_adjustment(store, student_id, amount, adjustment_type, date, description):
    """
    Post a manual ledger entry for a student.

    CREDIT records a payment (+amount); DEBIT records a charge (-amount).
    The student's balance moves by the same signed amount.
    """
    adjustment_type = AdjustmentType(adjustment_type)
    if amount <= 0:
        raise ValueError("amount must be positive")
    if adjustment_type == AdjustmentType.CREDIT:
        signed, tx_type = amount, TransactionType.PAYMENT
    else:
        signed, tx_type = -amount, TransactionType.ADJUSTMENT_DEBIT

    with store.mutate() as data:
        if find_by_id(data["students"], student_id) is None:
            raise NotFoundError("students", student_id)
        transaction = {
            "id": generate_unique_id("TRX"),
            "studentId": student_id,
            "date": date,
            "type": tx_type.value,
            "description": description,
            "amount": signed,
        }
        data["transactions"].append(transaction)
        apply_balance_delta(data, student_id, signed)
    logger.info("Posted %s of %s for student %s", tx_type.value, signed, student_id)
    return transaction


def update_transaction(store, transaction):
    """
    Replace a transaction and move balances by the amount difference.

    A linked invoice keeps its own amount and status; they are not re-synced.
    """
    with store.mutate() as data:
        old = find_by_id(data["transactions"], transaction["id"])
        if old is None:
            raise NotFoundError("transactions", transaction["id"])
        if old.get("studentId") == transaction.get("studentId"):
            apply_balance_delta(data, transaction["studentId"], transaction["amount"] - old["amount"])
        else:
            apply_balance_delta(data, old.get("studentId"), -old["amount"])
            apply_balance_delta(data, transaction.get("studentId"), transaction["amount"])
        data["transactions"] = [
            transaction if t["id"] == transaction["id"] else t for t in data["transactions"]
        ]
    return transaction


def delete_transaction(store, transaction_id):
    """Remove a transaction and reverse its effect on the student's balance."""
    with store.mutate() as data:
        transaction = find_by_id(data["transactions"], transaction_id)
        if transaction is None:
            raise NotFoundError("transactions", transaction_id)
        data["transactions"] = [t for t in data["transactions"] if t["id"] != transaction_id]
        apply_balance_delta(data, transaction.get("studentId"), -transaction["amount"])
    logger.info("Deleted transaction %s", transaction_id)


def clear_all_transactions(store):
    """Wipe the ledger: every transaction and invoice goes, balances return to zero."""
    with store.mutate() as data:
        for student in data["students"]:
            student["balance"] = 0
        data["transactions"] = []
        data["invoices"] = []
    logger.warning("All transactions and invoices were cleared")


def fetch_transactions(store, student_id=None):
    rows = store.list("transactions")
    if student_id is not None:
        rows = [t for t in rows if t.get("studentId") == student_id]
    return sorted(rows, key=lambda t: t.get("date") or "", reverse=True)
