import logging

from Eduledger.data.db import get_connection

logger = logging.getLogger(__name__)


class KeyValueStore:
	"""Simple string key/value store backed by the ``kv_store`` table."""

	def __init__(self, db_path):
		self.db_path = db_path

	def set(self, key, value):
		"""Insert or update a key/value pair."""
		with get_connection(self.db_path) as conn:
			conn.execute(
				"REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, datetime('now','localtime'))",
				(key, str(value))
			)
			conn.commit()

	def get(self, key, default=None):
		"""Retrieve a value by key, or return default."""
		with get_connection(self.db_path) as conn:
			c = conn.cursor()
			c.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
			row = c.fetchone()
			return row[0] if row else default

	def delete(self, key):
		with get_connection(self.db_path) as conn:
			conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
			conn.commit()
