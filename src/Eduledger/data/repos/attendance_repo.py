import logging

from Eduledger.core.constants import ATTENDED_STATUSES
from Eduledger.core.utils import generate_unique_id, in_month, month_key

logger = logging.getLogger(__name__)


def attendance_key(record):
	"""Logical identity of an attendance row."""
	return (record.get("classId"), record.get("studentId"), record.get("date"))


def update_attendance(store, records):
	"""
	Save a batch of attendance rows.

	Rows are grouped by (classId, date); each group replaces every stored row
	of that class on that date. Within one group, a later row for the same
	student wins. An empty batch changes nothing.
	"""
	groups = {}
	for record in records:
		slot = (record["classId"], record["date"])
		rows = groups.setdefault(slot, {})
		rows[record["studentId"]] = dict(record, id=record.get("id") or generate_unique_id("ATT"))

	if not groups:
		return 0

	with store.mutate() as data:
		kept = [a for a in data["attendance"] if (a.get("classId"), a.get("date")) not in groups]
		for rows in groups.values():
			kept.extend(rows.values())
		data["attendance"] = kept

	saved = sum(len(rows) for rows in groups.values())
	logger.info("Saved %d attendance row(s) across %d class session(s)", saved, len(groups))
	return saved


def delete_attendance_for_date(store, class_id, date):
	"""Remove every row of one class on one date. Returns the number removed."""
	with store.mutate() as data:
		before = len(data["attendance"])
		data["attendance"] = [
			a for a in data["attendance"]
			if not (a.get("classId") == class_id and a.get("date") == date)
		]
		return before - len(data["attendance"])


def delete_attendance_by_month(store, month, year):
	month_str = month_key(month, year)
	with store.mutate() as data:
		before = len(data["attendance"])
		data["attendance"] = [a for a in data["attendance"] if not in_month(a.get("date"), month_str)]
		removed = before - len(data["attendance"])
	logger.info("Deleted %d attendance row(s) for %s", removed, month_str)
	return removed


def fetch_attendance(store, class_id=None, date=None, month=None, year=None):
	rows = store.list("attendance")
	if class_id is not None:
		rows = [a for a in rows if a.get("classId") == class_id]
	if date is not None:
		rows = [a for a in rows if a.get("date") == date]
	if month is not None and year is not None:
		month_str = month_key(month, year)
		rows = [a for a in rows if in_month(a.get("date"), month_str)]
	return rows


def count_attended_sessions(attendance, student_id, class_id, month_str):
	"""PRESENT or LATE rows of a student in a class during a YYYY-MM month."""
	return sum(
		1 for a in attendance
		if a.get("studentId") == student_id
		and a.get("classId") == class_id
		and in_month(a.get("date"), month_str)
		and a.get("status") in ATTENDED_STATUSES
	)
