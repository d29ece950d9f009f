import sys
import logging
from pathlib import Path

from Eduledger.paths import LOG_FILENAME

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_logging(log_dir: Path, level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        return  # respect existing setup
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8")
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(formatter)

    root.setLevel(numeric_level)
    root.addHandler(file_handler)

    # Frozen builds have no usable console
    if not getattr(sys, "frozen", False):
        stream = sys.__stderr__ if getattr(sys, "__stderr__", None) is not None else sys.stderr
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
