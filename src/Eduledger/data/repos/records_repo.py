"""Independent records: progress reports, income, expenses and announcements."""
from Eduledger.core.utils import generate_unique_id, today_str


def add_progress_report(store, report):
	return store.insert("progressReports", dict(report, id=generate_unique_id("PR")))


def delete_progress_report(store, report_id):
	store.remove("progressReports", report_id)


def add_income(store, item):
	return store.insert("income", dict(item, id=generate_unique_id("INC")))


def update_income(store, item):
	return store.replace("income", item["id"], item)


def delete_income(store, item_id):
	store.remove("income", item_id)


def add_expense(store, item):
	return store.insert("expenses", dict(item, id=generate_unique_id("EXP")))


def update_expense(store, item):
	return store.replace("expenses", item["id"], item)


def delete_expense(store, item_id):
	store.remove("expenses", item_id)


def add_announcement(store, announcement):
	record = dict(announcement, id=generate_unique_id("ANN"), createdAt=today_str())
	return store.insert("announcements", record)


def delete_announcement(store, announcement_id):
	store.remove("announcements", announcement_id)
