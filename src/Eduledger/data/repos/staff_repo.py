from Eduledger.core.utils import today_str
from Eduledger.data.store import find_by_id
from Eduledger.errors import DuplicateIdError, NotFoundError


def add_staff(store, member):
	return store.insert("staff", dict(member, createdAt=today_str()))


def update_staff(store, original_id, updated_staff):
	new_id = updated_staff["id"]
	with store.mutate() as data:
		staff = data["staff"]
		if find_by_id(staff, original_id) is None:
			raise NotFoundError("staff", original_id)
		if new_id != original_id and find_by_id(staff, new_id) is not None:
			raise DuplicateIdError("staff", new_id)
		data["staff"] = [updated_staff if s["id"] == original_id else s for s in staff]
	return updated_staff


def delete_staff(store, staff_id):
	store.remove("staff", staff_id)
