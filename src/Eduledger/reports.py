"""Read-only figures computed from a loaded aggregate."""
from Eduledger.core.constants import (
    ATTENDED_STATUSES, FeeType, PersonStatus, TransactionType,
)
from Eduledger.core.utils import in_month, month_key

PAYMENT_TYPES = {TransactionType.PAYMENT.value, TransactionType.ADJUSTMENT_CREDIT.value}


def _is_cancellation_refund(transaction):
    return (
        transaction.get("type") == TransactionType.ADJUSTMENT_CREDIT.value
        and transaction.get("relatedInvoiceId") is not None
    )


def monthly_kpis(data, month, year):
    """Revenue, expense and tuition figures for one month."""
    month_str = month_key(month, year)

    tuition_collected = sum(
        t["amount"] for t in data["transactions"]
        if t.get("type") in PAYMENT_TYPES
        and in_month(t.get("date"), month_str)
        and t.get("amount", 0) > 0
        and not _is_cancellation_refund(t)
    )
    other_income = sum(i.get("amount", 0) for i in data["income"] if in_month(i.get("date"), month_str))
    total_expense = sum(e.get("amount", 0) for e in data["expenses"] if in_month(e.get("date"), month_str))

    attended = {}
    for a in data["attendance"]:
        if in_month(a.get("date"), month_str) and a.get("status") in ATTENDED_STATUSES:
            key = (a.get("studentId"), a.get("classId"))
            attended[key] = attended.get(key, 0) + 1

    active_ids = {s["id"] for s in data["students"] if s.get("status") == PersonStatus.ACTIVE.value}
    provisional = 0
    for cls in data["classes"]:
        enrolled = [sid for sid in cls["studentIds"] if sid in active_ids]
        rate = cls["fee"].get("amount", 0)
        if cls["fee"].get("type") == FeeType.MONTHLY.value:
            provisional += len(enrolled) * rate
        elif cls["fee"].get("type") == FeeType.PER_SESSION.value:
            provisional += sum(attended.get((sid, cls["id"]), 0) for sid in enrolled) * rate

    revenue = tuition_collected + other_income
    return {
        "month": month_str,
        "tuitionCollected": tuition_collected,
        "otherIncome": other_income,
        "totalRevenue": revenue,
        "totalExpense": total_expense,
        "profit": revenue - total_expense,
        "provisionalTuition": provisional,
    }


def attendance_report(data, month, year, class_id=None):
    month_str = month_key(month, year)
    students = [s for s in data["students"] if s.get("status") == PersonStatus.ACTIVE.value]
    if class_id is not None:
        members = set()
        for cls in data["classes"]:
            if cls["id"] == class_id:
                members = set(cls["studentIds"])
        students = [s for s in students if s["id"] in members]

    counts = {}
    for a in data["attendance"]:
        if (in_month(a.get("date"), month_str)
                and (class_id is None or a.get("classId") == class_id)
                and a.get("status") in ATTENDED_STATUSES):
            counts[a.get("studentId")] = counts.get(a.get("studentId"), 0) + 1

    rows = []
    for student in students:
        rows.append({
            "id": student["id"],
            "name": student.get("name", ""),
            "classNames": ", ".join(c["name"] for c in data["classes"] if student["id"] in c["studentIds"]),
            "attendanceCount": counts.get(student["id"], 0),
        })
    rows.sort(key=lambda r: (-r["attendanceCount"], r["name"].lower()))
    return rows


def debtors(data):
    """Students owing money, largest debt first."""
    owing = [s for s in data["students"] if s.get("balance", 0) < 0]
    return sorted(owing, key=lambda s: s["balance"])
