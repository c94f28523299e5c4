import math
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from . import config

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
MAX_ROW_ID = 2**63 - 1


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    offset: int
    q: str

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def parse_int(value, default: int) -> int:
    """Parse the leading integer of ``value`` ("2abc" -> 2), else ``default``."""
    if value is None:
        return default
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else default


def parse_pagination(params: Mapping[str, str]) -> Pagination:
    page = max(1, parse_int(params.get("page"), 1))
    page = min(page, MAX_ROW_ID // config.MAX_PAGE_LIMIT)
    limit = parse_int(params.get("limit"), config.DEFAULT_PAGE_LIMIT)
    limit = min(config.MAX_PAGE_LIMIT, max(1, limit))
    q = str(params.get("q") or "").strip()
    return Pagination(page=page, limit=limit, offset=(page - 1) * limit, q=q)


def parse_id(raw: str) -> Optional[int]:
    """Numeric id from a path segment, or None when it can't name a row."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    value = int(value)
    # SQLite INTEGER is 64-bit signed
    return value if abs(value) <= MAX_ROW_ID else None


def like_pattern(term: str) -> str:
    """``%term%`` with LIKE wildcards in ``term`` escaped by backslash."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
