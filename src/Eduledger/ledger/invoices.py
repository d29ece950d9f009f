import logging

from Eduledger.core.constants import FeeType, InvoiceStatus, PersonStatus, TransactionType
from Eduledger.core.utils import format_currency, generate_unique_id, month_key, today_str
from Eduledger.data.repos.attendance_repo import count_attended_sessions
from Eduledger.data.store import find_by_id
from Eduledger.errors import NotFoundError
from Eduledger.ledger.balances import apply_balance_delta
from Eduledger.ledger.states import check_transition

logger = logging.getLogger(__name__)

FLAT_FEE_TYPES = {FeeType.MONTHLY.value, FeeType.PER_COURSE.value}


def compute_student_charges(data, student_id, month_str):
    """
    Tuition owed by one student for a YYYY-MM month.

    MONTHLY and PER_COURSE classes charge their flat fee; PER_SESSION classes
    charge attended (PRESENT/LATE) sessions times the unit rate.
    Returns (total_amount, details).
    """
    total = 0
    lines = []
    for cls in data["classes"]:
        if student_id not in cls["studentIds"]:
            continue
        fee_type = cls["fee"].get("type")
        rate = cls["fee"].get("amount", 0)
        class_fee = 0
        if fee_type in FLAT_FEE_TYPES:
            class_fee = rate
            if class_fee > 0:
                lines.append(f"- Class {cls['name']}: {format_currency(class_fee)}")
        elif fee_type == FeeType.PER_SESSION.value:
            sessions = count_attended_sessions(data["attendance"], student_id, cls["id"], month_str)
            if sessions > 0:
                class_fee = sessions * rate
                lines.append(
                    f"- Class {cls['name']}: {sessions} sessions x {format_currency(rate)}"
                    f" = {format_currency(class_fee)}"
                )
        total += class_fee
    return total, "\n".join(lines)


def _paired_transaction(data, invoice_id):
    for t in data["transactions"]:
        if t.get("relatedInvoiceId") == invoice_id and t.get("type") == TransactionType.INVOICE.value:
            return t
    return None


def generate_invoices(store, month, year, today=None):
    """
    Create or refresh the tuition invoices of every active student for a month.

    Safe to re-run: an UNPAID invoice whose recomputed amount changed is
    adjusted in place and only the difference hits the balance. PAID and
    CANCELLED invoices are never touched.
    """
    month_str = month_key(month, year)
    issued = today_str(today)
    summary = {"created": 0, "adjusted": 0, "unchanged": 0}

    with store.mutate() as data:
        for student in data["students"]:
            if student.get("status") != PersonStatus.ACTIVE.value:
                continue
            total, details = compute_student_charges(data, student["id"], month_str)
            existing = next(
                (inv for inv in data["invoices"]
                 if inv.get("studentId") == student["id"] and inv.get("month") == month_str),
                None,
            )

            if existing is not None:
                if existing["status"] != InvoiceStatus.UNPAID.value or total == existing["amount"]:
                    summary["unchanged"] += 1
                    continue
                existing["amount"] = total
                existing["details"] = details
                paired = _paired_transaction(data, existing["id"])
                if paired is not None:
                    # The paired row may have been edited since generation.
                    apply_balance_delta(data, student["id"], -total - paired["amount"])
                    paired["amount"] = -total
                else:
                    logger.warning(
                        "Invoice %s has no INVOICE transaction; amount updated without touching the balance",
                        existing["id"],
                    )
                summary["adjusted"] += 1
                continue

            if total <= 0:
                continue

            invoice_id = generate_unique_id("INV")
            data["invoices"].append({
                "id": invoice_id,
                "studentId": student["id"],
                "studentName": student.get("name", ""),
                "month": month_str,
                "amount": total,
                "details": details,
                "status": InvoiceStatus.UNPAID.value,
                "generatedDate": issued,
                "paidDate": None,
            })
            data["transactions"].append({
                "id": generate_unique_id("TRX"),
                "studentId": student["id"],
                "date": issued,
                "type": TransactionType.INVOICE.value,
                "description": f"Tuition invoice {int(month)}/{int(year)}",
                "amount": -total,
                "relatedInvoiceId": invoice_id,
            })
            apply_balance_delta(data, student["id"], -total)
            summary["created"] += 1

    logger.info(
        "Invoices for %s: %d created, %d adjusted, %d unchanged",
        month_str, summary["created"], summary["adjusted"], summary["unchanged"],
    )
    return summary


def _cancel(data, invoice, today=None):
    check_transition(invoice, InvoiceStatus.CANCELLED)
    invoice["status"] = InvoiceStatus.CANCELLED.value
    data["transactions"].append({
        "id": generate_unique_id("TRX"),
        "studentId": invoice["studentId"],
        "date": today_str(today),
        "type": TransactionType.ADJUSTMENT_CREDIT.value,
        "description": f"Cancelled invoice #{invoice['id']}",
        "amount": invoice["amount"],
        "relatedInvoiceId": invoice["id"],
    })
    apply_balance_delta(data, invoice["studentId"], invoice["amount"])


def cancel_invoice(store, invoice_id, today=None):
    """
    Cancel an UNPAID invoice and refund its amount with an ADJUSTMENT_CREDIT.

    Cancelling a cancelled invoice does nothing; a PAID invoice raises
    InvalidTransitionError.
    """
    with store.mutate() as data:
        invoice = find_by_id(data["invoices"], invoice_id)
        if invoice is None:
            raise NotFoundError("invoices", invoice_id)
        if invoice["status"] == InvoiceStatus.CANCELLED.value:
            return False
        _cancel(data, invoice, today)
    logger.info("Cancelled invoice %s", invoice_id)
    return True


def update_invoice_status(store, invoice_id, status, today=None):
    """Move an invoice along UNPAID -> PAID | CANCELLED. Same status is a no-op."""
    status = InvoiceStatus(status)
    with store.mutate() as data:
        invoice = find_by_id(data["invoices"], invoice_id)
        if invoice is None:
            raise NotFoundError("invoices", invoice_id)
        if invoice["status"] == status.value:
            return invoice
        if status == InvoiceStatus.CANCELLED:
            _cancel(data, invoice, today)
        else:
            check_transition(invoice, status)
            invoice["status"] = status.value
            if status == InvoiceStatus.PAID:
                invoice["paidDate"] = today_str(today)
    logger.info("Invoice %s -> %s", invoice_id, status.value)
    return invoice


def fetch_invoices(store, month=None, year=None, student_id=None, status=None):
    invoices = store.list("invoices")
    if month is not None and year is not None:
        month_str = month_key(month, year)
        invoices = [i for i in invoices if i.get("month") == month_str]
    if student_id is not None:
        invoices = [i for i in invoices if i.get("studentId") == student_id]
    if status is not None:
        invoices = [i for i in invoices if i.get("status") == InvoiceStatus(status).value]
    return invoices
