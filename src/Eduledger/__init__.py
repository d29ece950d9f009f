"""Local-first records and billing ledger for a small tutoring center."""

__version__ = "1.0.0"
