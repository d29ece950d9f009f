import logging
from pathlib import Path

from Eduledger.config import load_config
from Eduledger.data.backends import BackendSelector, OsPermissionGate
from Eduledger.data.handles_repo import HandleStore
from Eduledger.data.kv_repo import KeyValueStore
from Eduledger.data.schema import create_tables
from Eduledger.data.store import Store
from Eduledger.logging_setup import ensure_logging
from Eduledger.paths import get_db_path

logger = logging.getLogger(__name__)


def build_store(data_dir, gate=None, file_access_supported=True, seed_factory=None):
    """Wire the auxiliary database, both backends and the Store for ``data_dir``."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = get_db_path(data_dir)
    create_tables(db_path)

    kwargs = {}
    if seed_factory is not None:
        kwargs["seed_factory"] = seed_factory
    selector = BackendSelector(
        KeyValueStore(db_path),
        HandleStore(db_path),
        gate=gate or OsPermissionGate(),
        file_access_supported=file_access_supported,
        **kwargs,
    )
    return Store(selector)


def initialize_store(config=None, gate=None):
    """Process entry point: load config, set up logging and return the Store."""
    config = config or load_config()
    ensure_logging(config.data_dir, config.log_level)
    store = build_store(
        config.data_dir,
        gate=gate,
        file_access_supported=config.file_access_enabled,
    )
    logger.info("Store ready (data dir: %s)", config.data_dir)
    return store
