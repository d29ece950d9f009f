"""Aggregate schema and the load-time normalization step.

The persisted aggregate is one JSON object with a fixed set of top-level
keys. Field defaults live in ``RECORD_DEFAULTS`` and are applied once when the
aggregate is loaded, so the rest of the code can index records directly.
"""
import copy
import logging

from Eduledger.errors import ParseError

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "students",
    "teachers",
    "staff",
    "classes",
    "attendance",
    "invoices",
    "progressReports",
    "transactions",
    "income",
    "expenses",
    "payrolls",
    "announcements",
)

SETTINGS_KEY = "settings"

TOP_LEVEL_KEYS = COLLECTIONS + (SETTINGS_KEY,)

DEFAULT_SETTINGS = {
    "centerName": "",
    "address": "",
    "phone": "",
    "onboardingStepsCompleted": [],
}

RECORD_DEFAULTS = {
    "students": {"name": "", "status": "ACTIVE", "balance": 0},
    "teachers": {"name": "", "status": "ACTIVE", "salaryType": "MONTHLY", "rate": 0},
    "staff": {"name": ""},
    "classes": {"name": "", "fee": {"type": "MONTHLY", "amount": 0}, "studentIds": [], "teacherIds": []},
    "attendance": {"status": "UNMARKED"},
    "invoices": {"amount": 0, "status": "UNPAID", "details": "", "paidDate": None},
    "progressReports": {},
    "transactions": {"amount": 0, "description": ""},
    "income": {"amount": 0, "category": "", "description": ""},
    "expenses": {"amount": 0, "category": "", "description": ""},
    "payrolls": {"sessionsTaught": 0, "totalSalary": 0},
    "announcements": {},
}


def empty_aggregate():
    data = {name: [] for name in COLLECTIONS}
    data[SETTINGS_KEY] = copy.deepcopy(DEFAULT_SETTINGS)
    return data


def _has_id(item):
    return isinstance(item, dict) and isinstance(item.get("id"), str) and item["id"] != ""


def _normalize_record(collection, record):
    for field, default in RECORD_DEFAULTS[collection].items():
        if field not in record or (record[field] is None and default is not None):
            record[field] = copy.deepcopy(default)
    if collection == "classes":
        fee = record["fee"]
        if not isinstance(fee, dict):
            record["fee"] = copy.deepcopy(RECORD_DEFAULTS["classes"]["fee"])
        else:
            fee.setdefault("type", "MONTHLY")
            fee.setdefault("amount", 0)
        for key in ("studentIds", "teacherIds"):
            if not isinstance(record[key], list):
                record[key] = []
    return record


def normalize_aggregate(raw):
    """Return a well-formed aggregate built from ``raw``.

    Raises ParseError if ``raw`` is not a JSON object. Absent or non-array
    collections become empty; non-object items and records without a string
    id are dropped.
    """
    if not isinstance(raw, dict):
        raise ParseError(
            "Data file does not contain a JSON object. "
            "It may be corrupted or it may not be an Eduledger data file."
        )
    raw = copy.deepcopy(raw)
    data = {}
    for name in COLLECTIONS:
        items = raw.get(name)
        if not isinstance(items, list):
            if items is not None:
                logger.warning("Collection %s is not an array; treating it as empty", name)
            items = []
        valid = [item for item in items if _has_id(item)]
        dropped = len(items) - len(valid)
        if dropped:
            logger.warning("Dropped %d malformed record(s) from %s", dropped, name)
        data[name] = [_normalize_record(name, item) for item in valid]

    settings = copy.deepcopy(DEFAULT_SETTINGS)
    raw_settings = raw.get(SETTINGS_KEY)
    if isinstance(raw_settings, dict):
        settings.update(raw_settings)
    if not isinstance(settings.get("onboardingStepsCompleted"), list):
        settings["onboardingStepsCompleted"] = []
    data[SETTINGS_KEY] = settings
    return data
