from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PolicyName
from ..core.exceptions import ValidationError
from .policies.base import PercentagePolicy
from .policies.present_only import PresentOnlyPolicy
from .policies.present_or_late import PresentOrLatePolicy


@dataclass
class PercentagePolicyFactory:
    """Factory Pattern: pick the percentage policy named in settings."""

    default: PolicyName = PolicyName.PRESENT_ONLY

    def for_name(self, name: str | None) -> PercentagePolicy:
        if not name:
            name = self.default.value
        try:
            policy_name = PolicyName(str(name).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown attendance policy: {name!r}") from None

        if policy_name == PolicyName.PRESENT_OR_LATE:
            return PresentOrLatePolicy()
        return PresentOnlyPolicy()
