from __future__ import annotations

from typing import Optional

from funnelmetrics.shared.base import FrozenSchema
from funnelmetrics.shared.time import format_month_index


class MonthRange(FrozenSchema):
    """Closed interval of month indexes; both bounds ``None`` means unbounded."""

    selector: str
    start: Optional[int] = None
    end: Optional[int] = None
    full_year: bool = False

    @property
    def is_unbounded(self) -> bool:
        return self.start is None or self.end is None

    def contains(self, index: Optional[int]) -> bool:
        if index is None:
            return False
        if self.is_unbounded:
            return True
        return self.start <= index <= self.end

    def start_label(self) -> Optional[str]:
        return format_month_index(self.start) if self.start is not None else None

    def end_label(self) -> Optional[str]:
        return format_month_index(self.end) if self.end is not None else None
