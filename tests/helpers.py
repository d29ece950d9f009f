from Eduledger.data.normalize import empty_aggregate
from Eduledger.ledger.balances import find_balance_drift


def make_student(student_id, name=None, status="ACTIVE", balance=0, **extra):
    return dict({"id": student_id, "name": name or f"Student {student_id}",
                 "status": status, "balance": balance}, **extra)


def make_teacher(teacher_id, salary_type="PER_SESSION", rate=200000, status="ACTIVE", name=None):
    return {"id": teacher_id, "name": name or f"Teacher {teacher_id}", "status": status,
            "salaryType": salary_type, "rate": rate}


def make_class(class_id, fee_type="PER_SESSION", amount=100000, student_ids=(), teacher_ids=(), name=None):
    return {"id": class_id, "name": name or f"Class {class_id}",
            "fee": {"type": fee_type, "amount": amount},
            "studentIds": list(student_ids), "teacherIds": list(teacher_ids)}


def make_attendance(class_id, student_id, date, status="PRESENT", record_id=None):
    return {"id": record_id or f"ATT-{class_id}-{student_id}-{date}", "classId": class_id,
            "studentId": student_id, "date": date, "status": status}


def aggregate(**collections):
    data = empty_aggregate()
    data.update(collections)
    return data


def assert_ledger_consistent(data):
    assert find_balance_drift(data) == {}


def student_balance(data, student_id):
    return next(s["balance"] for s in data["students"] if s["id"] == student_id)
