import logging

from Eduledger.core.utils import today_str
from Eduledger.data.store import find_by_id
from Eduledger.errors import DuplicateIdError, NotFoundError

logger = logging.getLogger(__name__)


def add_teacher(store, teacher):
	return store.insert("teachers", dict(teacher, createdAt=today_str()))


def update_teacher(store, original_id, updated_teacher):
	"""Replace a teacher; an id change is followed into Class.teacherIds.

	Payroll rows of the teacher are dropped: they are derived from the old
	rate and are rebuilt by the next payroll generation.
	"""
	new_id = updated_teacher["id"]
	with store.mutate() as data:
		teachers = data["teachers"]
		if find_by_id(teachers, original_id) is None:
			raise NotFoundError("teachers", original_id)
		if new_id != original_id:
			if find_by_id(teachers, new_id) is not None:
				raise DuplicateIdError("teachers", new_id)
			for cls in data["classes"]:
				cls["teacherIds"] = [new_id if tid == original_id else tid for tid in cls["teacherIds"]]
		data["teachers"] = [updated_teacher if t["id"] == original_id else t for t in teachers]
		data["payrolls"] = [p for p in data["payrolls"] if p.get("teacherId") != original_id]
	return updated_teacher


def delete_teacher(store, teacher_id):
	with store.mutate() as data:
		data["teachers"] = [t for t in data["teachers"] if t["id"] != teacher_id]
		for cls in data["classes"]:
			cls["teacherIds"] = [tid for tid in cls["teacherIds"] if tid != teacher_id]
		data["payrolls"] = [p for p in data["payrolls"] if p.get("teacherId") != teacher_id]
	logger.info("Deleted teacher %s", teacher_id)


def fetch_teachers(store, status=None):
	teachers = store.list("teachers")
	if status is not None:
		teachers = [t for t in teachers if t.get("status") == status]
	return teachers
