import logging

from Eduledger.data.store import find_by_id

logger = logging.getLogger(__name__)


def apply_balance_delta(data, student_id, delta):
    """Move a student's cached balance by ``delta``; unknown students are skipped."""
    student = find_by_id(data["students"], student_id)
    if student is None:
        logger.warning("Transaction for unknown student %s; balance not updated", student_id)
        return
    student["balance"] = student.get("balance", 0) + delta


def ledger_balance(data, student_id):
    return sum(t.get("amount", 0) for t in data["transactions"] if t.get("studentId") == student_id)


def find_balance_drift(data):
    """Map student id -> (cached balance, ledger sum) for every mismatch."""
    drift = {}
    for student in data["students"]:
        expected = ledger_balance(data, student["id"])
        if student.get("balance", 0) != expected:
            drift[student["id"]] = (student.get("balance", 0), expected)
    return drift


def reconcile_balances(store):
    """Rewrite cached balances from the transactions. Returns the repaired drift."""
    with store.mutate() as data:
        drift = find_balance_drift(data)
        for student_id, (_, expected) in drift.items():
            find_by_id(data["students"], student_id)["balance"] = expected
    if drift:
        logger.warning("Reconciled balance drift for %d student(s)", len(drift))
    return drift
