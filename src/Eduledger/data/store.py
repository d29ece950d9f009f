import logging
from contextlib import contextmanager

from Eduledger.data.normalize import COLLECTIONS, SETTINGS_KEY
from Eduledger.errors import DuplicateIdError, NotFoundError

logger = logging.getLogger(__name__)


def _check_collection(collection):
	if collection not in COLLECTIONS:
		raise ValueError(f"unknown collection: {collection!r}")


def find_by_id(items, record_id):
	for item in items:
		if item.get("id") == record_id:
			return item
	return None


class Store:
	"""Handle on the persisted aggregate.

	Every operation is a full read-modify-write through the backend selector;
	nothing is cached between calls.
	"""

	def __init__(self, selector):
		self.selector = selector

	def load(self):
		return self.selector.read()

	def save(self, data):
		self.selector.write(data)

	@contextmanager
	def mutate(self):
		"""Yield the loaded aggregate and write it back if the block succeeds."""
		data = self.load()
		yield data
		self.save(data)

	# --- generic collection CRUD ---

	def list(self, collection):
		_check_collection(collection)
		return self.load()[collection]

	def get(self, collection, record_id):
		_check_collection(collection)
		record = find_by_id(self.load()[collection], record_id)
		if record is None:
			raise NotFoundError(collection, record_id)
		return record

	def insert(self, collection, record):
		_check_collection(collection)
		with self.mutate() as data:
			items = data[collection]
			if find_by_id(items, record["id"]) is not None:
				raise DuplicateIdError(collection, record["id"])
			items.append(record)
		logger.debug("Inserted %s into %s", record["id"], collection)
		return record

	def replace(self, collection, record_id, record):
		_check_collection(collection)
		with self.mutate() as data:
			items = data[collection]
			for index, item in enumerate(items):
				if item.get("id") == record_id:
					items[index] = record
					break
			else:
				raise NotFoundError(collection, record_id)
		return record

	def remove(self, collection, record_id):
		_check_collection(collection)
		with self.mutate() as data:
			data[collection] = [item for item in data[collection] if item.get("id") != record_id]

	# --- settings singleton ---

	def get_settings(self):
		return self.load()[SETTINGS_KEY]
