import logging

from Eduledger.data.store import find_by_id
from Eduledger.errors import DuplicateIdError, NotFoundError

logger = logging.getLogger(__name__)

# Collections whose records are scoped to a class through ``classId``
CLASS_REFERENCES = ("attendance", "progressReports", "announcements")


def add_class(store, cls):
	record = dict(cls)
	record.setdefault("studentIds", [])
	record.setdefault("teacherIds", [])
	return store.insert("classes", record)


def update_class(store, original_id, updated_class):
	"""Replace a class; an id change is followed into its scoped records."""
	new_id = updated_class["id"]
	with store.mutate() as data:
		classes = data["classes"]
		if find_by_id(classes, original_id) is None:
			raise NotFoundError("classes", original_id)
		if new_id != original_id:
			if find_by_id(classes, new_id) is not None:
				raise DuplicateIdError("classes", new_id)
			for name in CLASS_REFERENCES:
				for record in data[name]:
					if record.get("classId") == original_id:
						record["classId"] = new_id
		data["classes"] = [updated_class if c["id"] == original_id else c for c in classes]
	return updated_class


def delete_class(store, class_id):
	with store.mutate() as data:
		data["classes"] = [c for c in data["classes"] if c["id"] != class_id]
		for name in CLASS_REFERENCES:
			data[name] = [r for r in data[name] if r.get("classId") != class_id]
	logger.info("Deleted class %s", class_id)


def fetch_classes(store, teacher_id=None):
	classes = store.list("classes")
	if teacher_id is not None:
		classes = [c for c in classes if teacher_id in c["teacherIds"]]
	return classes
