"""Decide whether a candidate gets a wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import TypeDescriptor


class Reason(str, Enum):
    ELIGIBLE = "eligible"
    UNRESOLVED = "unresolved"
    MISSING_MARKER = "missing-marker"
    NOT_ABSTRACT = "not-abstract"


@dataclass(frozen=True)
class Eligibility:
    """Verdict for one candidate."""

    eligible: bool
    reason: Reason


def evaluate_eligibility(descriptor: Optional[TypeDescriptor]) -> Eligibility:
    """Return the verdict for a resolved candidate, or ``unresolved`` for ``None``."""
    if descriptor is None:
        return Eligibility(False, Reason.UNRESOLVED)
    if not descriptor.has_marker:
        return Eligibility(False, Reason.MISSING_MARKER)
    if not descriptor.is_abstract:
        return Eligibility(False, Reason.NOT_ABSTRACT)
    return Eligibility(True, Reason.ELIGIBLE)


__all__ = ["Eligibility", "Reason", "evaluate_eligibility"]
