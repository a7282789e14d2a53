import re
from typing import NamedTuple, Optional

MAX_LIMIT = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

class Page(NamedTuple):
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

def leading_int(raw: Optional[str]) -> Optional[int]:
    """'12abc' -> 12, '1.5' -> 1, 'abc' / '' / None -> None."""
    m = _LEADING_INT.match(raw or "")
    return int(m.group(1)) if m else None

def paginate(page: Optional[str], limit: Optional[str], default_limit: int) -> Page:
    p = leading_int(page)
    n = leading_int(limit)
    if not n or n < 1:
        n = default_limit
    return Page(page=max(1, p or 1), limit=min(MAX_LIMIT, n))
