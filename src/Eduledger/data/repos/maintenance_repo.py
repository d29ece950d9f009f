import json
import logging
from pathlib import Path

from Eduledger.backup.merge import merge_aggregate
from Eduledger.data.backends import FileHandle, dump_aggregate
from Eduledger.data.normalize import normalize_aggregate
from Eduledger.errors import ParseError, StorageError

logger = logging.getLogger(__name__)

CLEARABLE_COLLECTIONS = ("students", "teachers", "staff", "classes")


def backup_data(store):
	"""Full snapshot of the store, in the persisted aggregate shape."""
	return store.load()


def restore_data(store, backup):
	"""Merge ``backup`` into the store without discarding unseen current records."""
	if not isinstance(backup, dict):
		raise ParseError("Backup must be a JSON object with the data collections at the top level.")
	with store.mutate() as data:
		merged = normalize_aggregate(merge_aggregate(data, backup))
		data.clear()
		data.update(merged)
	logger.info("Restored backup with collections: %s", ", ".join(sorted(backup)) or "(none)")
	return data


def read_backup_file(path):
	try:
		text = Path(path).read_text(encoding="utf-8")
	except OSError as e:
		raise StorageError(f"Could not read backup file {path}: {e}") from e
	try:
		backup = json.loads(text)
	except json.JSONDecodeError as e:
		raise ParseError(f"Backup file {path} is not valid JSON: {e}") from e
	if not isinstance(backup, dict):
		raise ParseError(f"Backup file {path} does not contain a JSON object.")
	return backup


def write_backup_file(store, path):
	data = backup_data(store)
	try:
		FileHandle(path).write_text(dump_aggregate(data))
	except OSError as e:
		raise StorageError(f"Could not write backup file {path}: {e}") from e
	logger.info("Backup written to %s", path)
	return data


def clear_collections(store, keys):
	"""
	Empty the given top-level collections and everything that depends on them.

	students -> attendance, invoices, progress reports, transactions, Class.studentIds
	teachers -> payrolls, Class.teacherIds
	classes  -> attendance, progress reports, class announcements
	"""
	keys = set(keys)
	unknown = keys - set(CLEARABLE_COLLECTIONS)
	if unknown:
		raise ValueError(f"cannot clear collection(s): {', '.join(sorted(unknown))}")
	with store.mutate() as data:
		for key in keys:
			data[key] = []
		if "students" in keys:
			data["attendance"] = []
			data["invoices"] = []
			data["progressReports"] = []
			data["transactions"] = []
			for cls in data["classes"]:
				cls["studentIds"] = []
		if "teachers" in keys:
			data["payrolls"] = []
			for cls in data["classes"]:
				cls["teacherIds"] = []
		if "classes" in keys:
			data["attendance"] = []
			data["progressReports"] = []
			data["announcements"] = [a for a in data["announcements"] if not a.get("classId")]
	logger.warning("Cleared collections: %s", ", ".join(sorted(keys)))


def reset_to_seed(store):
	return store.selector.reset_to_seed()


def migrate_to_file(store, path):
	return store.selector.migrate_to_file(FileHandle(path))


def migrate_to_fallback(store):
	return store.selector.migrate_to_fallback()


def storage_info(store):
	resolved = store.selector.resolve_backend()
	return {
		"backend": resolved.kind.value,
		"path": str(resolved.handle.path) if resolved.handle else None,
		"fileAccessSupported": store.selector.supports_file_handle(),
	}
