import logging

from Eduledger.data.db import get_connection

logger = logging.getLogger(__name__)

HANDLE_KEY = "dataFileHandle"


class HandleStore:
	"""Remembers the authorized data file across sessions.

	Stored records are plain ``{"path", "name"}`` mappings; turning them back
	into handles is the backend selector's job.
	"""

	def __init__(self, db_path):
		self.db_path = db_path

	def get(self, key=HANDLE_KEY):
		with get_connection(self.db_path) as conn:
			c = conn.cursor()
			c.execute("SELECT path, name FROM file_handles WHERE key = ?", (key,))
			row = c.fetchone()
			if not row:
				return None
			return {"path": row["path"], "name": row["name"]}

	def set(self, record, key=HANDLE_KEY):
		with get_connection(self.db_path) as conn:
			conn.execute(
				"REPLACE INTO file_handles (key, path, name) VALUES (?, ?, ?)",
				(key, record["path"], record.get("name"))
			)
			conn.commit()

	def clear(self, key=HANDLE_KEY):
		with get_connection(self.db_path) as conn:
			conn.execute("DELETE FROM file_handles WHERE key = ?", (key,))
			conn.commit()
