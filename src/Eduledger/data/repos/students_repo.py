import logging

from Eduledger.core.utils import today_str
from Eduledger.data.store import find_by_id
from Eduledger.errors import DuplicateIdError, NotFoundError

logger = logging.getLogger(__name__)

# Collections whose records point at a student through ``studentId``
STUDENT_REFERENCES = ("attendance", "invoices", "progressReports", "transactions")


def add_student(store, student, class_ids=()):
	"""Register a student with a zero balance and enrol it in ``class_ids``."""
	class_ids = set(class_ids)
	new_student = dict(student, createdAt=today_str(), balance=0)
	with store.mutate() as data:
		if find_by_id(data["students"], new_student["id"]) is not None:
			raise DuplicateIdError("students", new_student["id"])
		data["students"].append(new_student)
		for cls in data["classes"]:
			if cls["id"] in class_ids and new_student["id"] not in cls["studentIds"]:
				cls["studentIds"].append(new_student["id"])
	logger.info("Added student %s", new_student["id"])
	return new_student


def update_student(store, original_id, updated_student, class_ids):
	"""Replace a student, following an id change through every reference.

	Class membership ends up exactly as ``class_ids`` says, under the new id.
	"""
	new_id = updated_student["id"]
	wanted = set(class_ids)
	with store.mutate() as data:
		students = data["students"]
		current = find_by_id(students, original_id)
		if current is None:
			raise NotFoundError("students", original_id)
		if new_id != original_id and find_by_id(students, new_id) is not None:
			raise DuplicateIdError("students", new_id)

		# The balance belongs to the ledger, not to the edit form
		updated_student = dict(updated_student, balance=current.get("balance", 0))

		data["students"] = [updated_student if s["id"] == original_id else s for s in students]

		if new_id != original_id:
			for name in STUDENT_REFERENCES:
				for record in data[name]:
					if record.get("studentId") == original_id:
						record["studentId"] = new_id
			for invoice in data["invoices"]:
				if invoice["studentId"] == new_id:
					invoice["studentName"] = updated_student.get("name", invoice.get("studentName"))

		for cls in data["classes"]:
			ids = [sid for sid in cls["studentIds"] if sid not in (original_id, new_id)]
			if cls["id"] in wanted:
				ids.append(new_id)
			cls["studentIds"] = ids
	if new_id != original_id:
		logger.info("Renamed student %s -> %s", original_id, new_id)
	return updated_student


def delete_student(store, student_id):
	"""Delete a student together with its attendance, invoices, reports and ledger."""
	with store.mutate() as data:
		data["students"] = [s for s in data["students"] if s["id"] != student_id]
		for cls in data["classes"]:
			cls["studentIds"] = [sid for sid in cls["studentIds"] if sid != student_id]
		for name in STUDENT_REFERENCES:
			data[name] = [r for r in data[name] if r.get("studentId") != student_id]
	logger.info("Deleted student %s and its dependent records", student_id)


def fetch_students(store, status=None):
	students = store.list("students")
	if status is not None:
		students = [s for s in students if s.get("status") == status]
	return sorted(students, key=lambda s: (s.get("name") or "").lower())


def fetch_classes_for_student(store, student_id):
	return [c for c in store.list("classes") if student_id in c["studentIds"]]
