from __future__ import annotations

from ..model import StatusCounts
from .base import PercentagePolicy


class PresentOnlyPolicy(PercentagePolicy):
    """Only PRESENT earns credit; LATE is reported separately."""

    name = "present_only"

    def credited(self, counts: StatusCounts) -> int:
        return counts.present
