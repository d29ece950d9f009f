from pathlib import Path
import platform, os, sys

APP_NAME = "Eduledger"

def get_app_data_dir() -> Path:
    override = os.getenv("EDULEDGER_DATA_DIR")
    if override:
        return Path(override).expanduser()
    sysname = platform.system()
    if sysname == "Windows":
        base = Path(os.getenv("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / APP_NAME
    elif sysname == "Darwin":  # macOS
        return Path.home() / "Library" / "Application Support" / APP_NAME
    else: # Linux / others
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))
        return base / APP_NAME

DB_FILENAME = "eduledger.db"
LOG_FILENAME = "eduledger.log"

def get_db_path(data_dir=None) -> Path:
    return Path(data_dir or get_app_data_dir()) / DB_FILENAME

def resource_path(*parts: str) -> Path:
    if getattr(sys, "frozen", False):
        base = Path(getattr(sys, "_MEIPASS", "."))
    else:
        base = Path(__file__).resolve().parent
    return (base / Path(*parts)).resolve()
