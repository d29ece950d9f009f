"""Persistence layer: auxiliary sqlite store, storage backends and the document store."""
