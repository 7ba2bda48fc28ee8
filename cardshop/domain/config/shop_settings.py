from __future__ import annotations

import re

SHOP_NAME_KEY = "shop_name"
LOW_STOCK_THRESHOLD_KEY = "low_stock_threshold"
CHECKIN_REWARD_KEY = "checkin_reward"
CHECKIN_ENABLED_KEY = "checkin_enabled"

MAX_SHOP_NAME_LENGTH = 64
DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_CHECKIN_REWARD = 10

# ASCII digits only, like the admin form's parseInt.
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def normalize_shop_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise ValueError("Shop name cannot be empty")
    if len(name) > MAX_SHOP_NAME_LENGTH:
        raise ValueError("Shop name is too long")
    return name


def normalize_positive_int(raw: str | int | None, default: int) -> str:
    """Parse like the admin form does: leading integer or the default."""
    match = _LEADING_INT.match(str(raw if raw is not None else ""))
    if not match:
        return str(default)
    number = int(match.group(1))
    if number <= 0:
        return str(default)
    return str(number)


def load_positive_int(raw: str | None, default: int) -> int:
    return int(normalize_positive_int(raw, default))


def load_flag(raw: str | None, default: bool = False) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() == "true"
