"""Non-destructive merge of a (possibly partial, possibly stale) backup.

Records are overlaid by key: backup wins on collision, records only in the
current store survive, records only in the backup are added. A collection
that is missing from the backup, or is not an array, leaves the current one
untouched. Applying the same backup twice gives the same result as once.
"""
import copy
import logging

from Eduledger.data.normalize import COLLECTIONS, SETTINGS_KEY
from Eduledger.data.repos.attendance_repo import attendance_key

logger = logging.getLogger(__name__)


def _merge_keyed(current, backup, key):
    if not isinstance(backup, list):
        return list(current or [])
    merged = {}
    for item in current or []:
        merged[key(item)] = item
    for item in backup:
        if isinstance(item, dict):
            merged[key(item)] = item
    return list(merged.values())


def merge_by_id(current, backup):
    return _merge_keyed(current, backup, lambda item: item.get("id"))


def merge_attendance(current, backup):
    # Attendance ids differ between devices; the logical record is
    # (classId, studentId, date).
    return _merge_keyed(current, backup, attendance_key)


def merge_settings(current, backup):
    merged = dict(current or {})
    if isinstance(backup, dict):
        merged.update(backup)
    return merged


def merge_aggregate(current, backup):
    """Return a new aggregate: ``current`` with ``backup`` overlaid."""
    backup = copy.deepcopy(backup or {})
    current = copy.deepcopy(current)
    restored = {}
    for name in COLLECTIONS:
        if name == "attendance":
            restored[name] = merge_attendance(current.get(name), backup.get(name))
        else:
            restored[name] = merge_by_id(current.get(name), backup.get(name))
        if name in backup and not isinstance(backup[name], list):
            logger.warning("Backup collection %s is not an array; kept current data", name)
    restored[SETTINGS_KEY] = merge_settings(current.get(SETTINGS_KEY), backup.get(SETTINGS_KEY))
    return restored
