import logging

from Eduledger.core.constants import PersonStatus, SalaryType
from Eduledger.core.utils import in_month, month_key, today_str

logger = logging.getLogger(__name__)


def payroll_id(teacher_id, month_str):
    return f"PAY-{teacher_id}-{month_str}"


def count_sessions_taught(data, teacher_id, month_str):
    """Distinct (classId, date) meetings with any attendance row, across the teacher's classes."""
    class_ids = {c["id"] for c in data["classes"] if teacher_id in c["teacherIds"]}
    sessions = {
        (a.get("classId"), a.get("date"))
        for a in data["attendance"]
        if a.get("classId") in class_ids and in_month(a.get("date"), month_str)
    }
    return len(sessions)


def generate_payrolls(store, month, year, today=None):
    """
    Compute the payroll of every active teacher for a month.

    The payroll id is derived from (teacher, month), so re-running replaces
    the earlier row instead of adding a second one.
    """
    month_str = month_key(month, year)
    calculated = today_str(today)
    written = []

    with store.mutate() as data:
        for teacher in data["teachers"]:
            if teacher.get("status") != PersonStatus.ACTIVE.value:
                continue
            rate = teacher.get("rate", 0)
            sessions_taught = 0
            if teacher.get("salaryType") == SalaryType.MONTHLY.value:
                total_salary = rate
            else:
                sessions_taught = count_sessions_taught(data, teacher["id"], month_str)
                total_salary = sessions_taught * rate

            row = {
                "id": payroll_id(teacher["id"], month_str),
                "teacherId": teacher["id"],
                "teacherName": teacher.get("name", ""),
                "month": month_str,
                "sessionsTaught": sessions_taught,
                "rate": rate,
                "baseSalary": rate if teacher.get("salaryType") == SalaryType.MONTHLY.value else 0,
                "totalSalary": total_salary,
                "calculationDate": calculated,
            }
            payrolls = data["payrolls"]
            for index, existing in enumerate(payrolls):
                if existing.get("id") == row["id"]:
                    payrolls[index] = row
                    break
            else:
                payrolls.append(row)
            written.append(row)

    logger.info("Generated %d payroll row(s) for %s", len(written), month_str)
    return written


def fetch_payrolls(store, month=None, year=None, teacher_id=None):
    rows = store.list("payrolls")
    if month is not None and year is not None:
        month_str = month_key(month, year)
        rows = [p for p in rows if p.get("month") == month_str]
    if teacher_id is not None:
        rows = [p for p in rows if p.get("teacherId") == teacher_id]
    return rows
