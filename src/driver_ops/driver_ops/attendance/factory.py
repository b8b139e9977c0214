from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import StatusPolicy
from .strategies.lenient_policy import LenientStatusPolicy
from .strategies.strict_policy import StrictStatusPolicy


@dataclass
class StatusPolicyFactory:
    """Factory Pattern: choose the status policy from the strictStatusValidation toggle."""

    def for_settings(self, *, strict_status_validation: bool) -> StatusPolicy:
        if strict_status_validation:
            return StrictStatusPolicy()
        return LenientStatusPolicy()
