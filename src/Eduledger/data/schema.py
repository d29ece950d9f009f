import logging
from pathlib import Path

from Eduledger.data.db import tx

logger = logging.getLogger(__name__)


def create_tables(db_path):
	"""Create the auxiliary tables (idempotent)."""
	Path(db_path).parent.mkdir(parents=True, exist_ok=True)
	with tx(db_path) as conn:
		c = conn.cursor()

		# Fallback backend: whole aggregate stored as one JSON text value
		c.execute("""
			CREATE TABLE IF NOT EXISTS kv_store (
				key TEXT PRIMARY KEY,
				value TEXT NOT NULL,
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")

		# Authorized data file handles, kept apart from the aggregate
		c.execute("""
			CREATE TABLE IF NOT EXISTS file_handles (
				key TEXT PRIMARY KEY,
				path TEXT NOT NULL,
				name TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")
	logger.debug("Auxiliary tables ensured at %s", db_path)
