from datetime import datetime
from typing import Union
import math

from pydantic import BaseModel

# Largest page whose offset still fits a signed 64-bit integer at the maximum limit.
MAX_PAGE = (2 ** 63 - 1) // 100


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PageMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            totalPages=math.ceil(total / limit) if limit else 0,
        )


def page_offset(page: int, limit: int) -> int:
    """Rows to skip for a 1-based page."""
    return (page - 1) * limit


def like_pattern(term: str) -> str:
    """Substring LIKE pattern with the wildcard characters taken literally (escape char is a backslash)."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def parse_datetime(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 date or timestamp into a naive local datetime.

    Raises ValueError when the value cannot be parsed or falls outside the
    representable range once converted to local time.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("empty date")
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        parsed = datetime.fromisoformat(raw)

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone().replace(tzinfo=None)
        except OverflowError as exc:
            raise ValueError("date out of range") from exc
    return parsed
