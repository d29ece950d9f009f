import logging

from Eduledger.core.constants import UserRole
from Eduledger.data.store import find_by_id
from Eduledger.errors import InvalidRoleError, NotFoundError

logger = logging.getLogger(__name__)

ROLE_COLLECTIONS = {
	UserRole.PARENT: "students",
	UserRole.TEACHER: "teachers",
	UserRole.MANAGER: "staff",
	UserRole.ACCOUNTANT: "staff",
}


def collection_for_role(role):
	try:
		role = UserRole(role)
	except ValueError:
		raise InvalidRoleError(role) from None
	collection = ROLE_COLLECTIONS.get(role)
	if collection is None:
		raise InvalidRoleError(role.value)
	return collection


def update_user_password(store, user_id, role, new_password):
	collection = collection_for_role(role)
	with store.mutate() as data:
		user = find_by_id(data[collection], user_id)
		if user is None:
			raise NotFoundError(collection, user_id)
		user["password"] = new_password
	logger.info("Password updated for %s in %s", user_id, collection)
