import os
import logging
from pathlib import Path
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from Eduledger.paths import get_app_data_dir, resource_path

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on", "enable", "enabled"}
FALSY = {"0", "false", "no", "off", "disable", "disabled"}


class AppConfig(NamedTuple):
    data_dir: Path
    file_access_enabled: bool
    log_level: str


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    s = raw.strip().lower()
    if s in TRUTHY:
        return True
    if s in FALSY:
        return False
    logger.warning("Unrecognised value %r for %s, using %s", raw, key, default)
    return default


def load_config(env_file: Optional[Path] = None) -> AppConfig:
    """Load .env (bundled one first, then cwd) and read EDULEDGER_* variables."""
    if env_file is not None:
        load_dotenv(env_file)
    else:
        bundled = resource_path(".env")
        if bundled.exists():
            load_dotenv(bundled)
        else:
            load_dotenv()

    level = (os.getenv("EDULEDGER_LOG_LEVEL") or "INFO").strip().upper()
    return AppConfig(
        data_dir=get_app_data_dir(),
        file_access_enabled=_env_bool("EDULEDGER_FILE_ACCESS", True),
        log_level=level,
    )
