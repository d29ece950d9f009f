import sqlite3
from contextlib import contextmanager


def get_connection(db_path):
	conn = sqlite3.connect(str(db_path))
	conn.row_factory = sqlite3.Row
	conn.execute("PRAGMA journal_mode = WAL")
	conn.execute("PRAGMA synchronous = NORMAL")
	return conn


@contextmanager
def tx(db_path):
	conn = get_connection(db_path)
	try:
		yield conn
		conn.commit()
	except Exception:
		conn.rollback()
		raise
	finally:
		conn.close()
