from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import StatusCounts


class PercentagePolicy(ABC):
    """Strategy Pattern: decide which marks earn attendance credit."""

    name: str = ""

    @abstractmethod
    def credited(self, counts: StatusCounts) -> int:
        raise NotImplementedError
