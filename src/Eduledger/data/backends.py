"""Storage backends and the selector that picks one on every access.

Two backends share the ``read_blob() / write_blob(text)`` contract:

* ``FileHandleBackend`` - a data file the user explicitly authorized. Read or
  write permission is verified on *every* call because the grant can be
  revoked between calls.
* ``FallbackBackend`` - one key in the auxiliary key-value store.

The selector never falls back to the key-value store when file permission is
denied; the denial is raised to the caller.
"""
import os
import json
import logging
import sqlite3
import tempfile
from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple, Optional

from Eduledger.data.normalize import normalize_aggregate
from Eduledger.data.seed import build_sample_data
from Eduledger.errors import ParseError, StorageError, StoragePermissionError

logger = logging.getLogger(__name__)

APP_DATA_KEY = "educenter_pro_data"

READ_DENIED_MESSAGE = (
    "Access to the data file was denied. Grant access again when asked, "
    "or switch to the built-in storage in Settings."
)
WRITE_DENIED_MESSAGE = (
    "Could not save changes: write access to the data file was denied. "
    "Grant access again or switch to the built-in storage in Settings."
)


class BackendKind(str, Enum):
    FILE_HANDLE = "FILE_HANDLE"
    FALLBACK = "FALLBACK"


class PermissionMode(str, Enum):
    READ = "read"
    READWRITE = "readwrite"


class PermissionState(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"


class FileHandle:
    """A user-chosen data file. Only the path is persisted between sessions."""

    def __init__(self, path, name=None):
        self.path = Path(path)
        self.name = name or self.path.name

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def write_text(self, text: str) -> None:
        # Write next to the target, then swap it in, so a failed write
        # leaves the previous file untouched.
        directory = self.path.parent
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=str(directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def to_record(self) -> dict:
        return {"path": str(self.path), "name": self.name}

    @classmethod
    def from_record(cls, record: dict) -> "FileHandle":
        return cls(record["path"], record.get("name"))

    def __eq__(self, other):
        return isinstance(other, FileHandle) and self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"FileHandle({str(self.path)!r})"


class OsPermissionGate:
    """Permission gate backed by operating-system file access checks.

    ``prompt(handle, mode)`` is an optional callable (usually supplied by the
    UI) that asks the user to allow access; it returns True to allow.
    Without it, a failed check is a denial.
    """

    def __init__(self, prompt: Optional[Callable[[FileHandle, PermissionMode], bool]] = None):
        self.prompt = prompt

    @staticmethod
    def _accessible(handle: FileHandle, mode: PermissionMode) -> bool:
        path = handle.path
        if path.exists():
            flags = os.R_OK if mode == PermissionMode.READ else os.R_OK | os.W_OK
            return os.access(path, flags)
        parent = path.parent
        if mode == PermissionMode.READ:
            return os.access(parent, os.X_OK)
        return os.access(parent, os.W_OK | os.X_OK)

    def query(self, handle, mode) -> PermissionState:
        if self._accessible(handle, mode):
            return PermissionState.GRANTED
        return PermissionState.PROMPT if self.prompt else PermissionState.DENIED

    def request(self, handle, mode) -> PermissionState:
        if self.prompt is None or not self.prompt(handle, mode):
            return PermissionState.DENIED
        return PermissionState.GRANTED if self._accessible(handle, mode) else PermissionState.DENIED


def verify_permission(gate, handle: FileHandle, with_write: bool = False) -> bool:
    mode = PermissionMode.READWRITE if with_write else PermissionMode.READ
    if gate.query(handle, mode) == PermissionState.GRANTED:
        return True
    if gate.request(handle, mode) == PermissionState.GRANTED:
        return True
    logger.warning("Permission %s denied for %s", mode.value, handle.path)
    return False


def dump_aggregate(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def parse_aggregate(text: str) -> dict:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Error reading the data file: {e}. "
            "The data may be corrupted or the file may have been moved."
        ) from e
    return normalize_aggregate(raw)


class FallbackBackend:
    kind = BackendKind.FALLBACK

    def __init__(self, kv, key=APP_DATA_KEY):
        self.kv = kv
        self.key = key

    def read_blob(self) -> Optional[str]:
        return self.kv.get(self.key)

    def write_blob(self, text: str) -> None:
        self.kv.set(self.key, text)

    def clear(self) -> None:
        self.kv.delete(self.key)


class FileHandleBackend:
    kind = BackendKind.FILE_HANDLE

    def __init__(self, handle: FileHandle, gate):
        self.handle = handle
        self.gate = gate

    def read_blob(self) -> Optional[str]:
        if not verify_permission(self.gate, self.handle, with_write=False):
            raise StoragePermissionError(READ_DENIED_MESSAGE)
        try:
            return self.handle.read_text()
        except OSError as e:
            logger.error("Failed to read data file %s: %s", self.handle.path, e)
            raise StorageError(
                f"Error reading the data file: {e}. "
                "The data may be corrupted or the file may have been moved."
            ) from e

    def write_blob(self, text: str) -> None:
        if not verify_permission(self.gate, self.handle, with_write=True):
            raise StoragePermissionError(WRITE_DENIED_MESSAGE)
        try:
            self.handle.write_text(text)
        except OSError as e:
            logger.error("Failed to write data file %s: %s", self.handle.path, e)
            raise StorageError(f"Error writing the data file: {e}") from e


class ResolvedBackend(NamedTuple):
    kind: BackendKind
    handle: Optional[FileHandle] = None


class BackendSelector:
    """Chooses the backend on each access and fronts it with read/write."""

    def __init__(self, kv, handles, gate=None, file_access_supported=True,
                 seed_factory=build_sample_data, data_key=APP_DATA_KEY):
        self.kv = kv
        self.handles = handles
        self.gate = gate or OsPermissionGate()
        self.file_access_supported = file_access_supported
        self.seed_factory = seed_factory
        self.fallback = FallbackBackend(kv, data_key)

    def supports_file_handle(self) -> bool:
        return bool(self.file_access_supported)

    def resolve_backend(self) -> ResolvedBackend:
        if not self.supports_file_handle():
            return ResolvedBackend(BackendKind.FALLBACK)
        try:
            record = self.handles.get()
        except sqlite3.Error as e:
            logger.error("Error checking the storage method: %s", e)
            record = None
        if record:
            return ResolvedBackend(BackendKind.FILE_HANDLE, FileHandle.from_record(record))
        return ResolvedBackend(BackendKind.FALLBACK)

    def _backend(self, resolved: ResolvedBackend):
        if resolved.kind == BackendKind.FILE_HANDLE:
            return FileHandleBackend(resolved.handle, self.gate)
        return self.fallback

    def read(self) -> dict:
        backend = self._backend(self.resolve_backend())
        blob = backend.read_blob()
        if not blob or not blob.strip():
            logger.info("No data found in %s storage; seeding sample data", backend.kind.value)
            seed = normalize_aggregate(self.seed_factory())
            backend.write_blob(dump_aggregate(seed))
            return seed
        return parse_aggregate(blob)

    def write(self, aggregate: dict) -> None:
        backend = self._backend(self.resolve_backend())
        backend.write_blob(dump_aggregate(aggregate))

    # --- one-shot, user-initiated migrations ---

    def migrate_to_file(self, handle: FileHandle) -> FileHandle:
        """Copy the current aggregate into ``handle`` and make it the active backend."""
        if not self.supports_file_handle():
            raise StorageError("File storage is not supported on this platform.")
        data = self.read()
        FileHandleBackend(handle, self.gate).write_blob(dump_aggregate(data))
        self.handles.set(handle.to_record())
        self.fallback.clear()
        logger.info("Migrated data to file storage at %s", handle.path)
        return handle

    def migrate_to_fallback(self) -> bool:
        """Copy the data file into the key-value store and forget the handle.

        Returns False when the fallback store was already active.
        """
        resolved = self.resolve_backend()
        if resolved.kind != BackendKind.FILE_HANDLE:
            logger.info("Already using the built-in storage; nothing to migrate")
            return False
        if not verify_permission(self.gate, resolved.handle, with_write=False):
            raise StoragePermissionError("No permission to read the data file for migration.")
        try:
            contents = resolved.handle.read_text()
        except OSError as e:
            raise StorageError(f"Could not read the data file for migration: {e}") from e
        self.fallback.write_blob(contents)
        self.handles.clear()
        logger.info("Migrated data from %s to the built-in storage", resolved.handle.path)
        return True

    def reset_to_seed(self) -> dict:
        self.fallback.clear()
        self.handles.clear()
        data = normalize_aggregate(self.seed_factory())
        self.write(data)
        logger.info("Store reset to the sample dataset")
        return data
