import time
import uuid
from datetime import date
from typing import Optional, Union

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_unique_id(prefix: str) -> str:
    """Type-prefixed id such as ``INV-1715000000000-k3x9a``."""
    millis = int(time.time() * 1000)
    n = uuid.uuid4().int
    suffix = ""
    for _ in range(5):
        n, r = divmod(n, 36)
        suffix += _ID_ALPHABET[r]
    return f"{prefix}-{millis}-{suffix}"


def today_str(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def month_key(month: int, year: int) -> str:
    """(5, 2024) -> '2024-05'."""
    if not 1 <= int(month) <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return f"{int(year):04d}-{int(month):02d}"


def in_month(date_str, month_str: str) -> bool:
    return isinstance(date_str, str) and date_str.startswith(month_str)


def format_currency(amount: Union[int, float], unit: str = "₫") -> str:
    """Thousands grouped with dots, e.g. 300000 -> '300.000 ₫'."""
    try:
        disp = int(round(float(amount)))
    except (TypeError, ValueError):
        return str(amount)
    return f"{disp:,} {unit}".replace(",", ".")
