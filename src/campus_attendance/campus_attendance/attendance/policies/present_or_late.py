from __future__ import annotations

from ..model import StatusCounts
from .base import PercentagePolicy


class PresentOrLatePolicy(PercentagePolicy):
    """PRESENT and LATE both earn credit."""

    name = "present_or_late"

    def credited(self, counts: StatusCounts) -> int:
        return counts.present + counts.late
