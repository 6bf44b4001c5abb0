"""Status badge domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusBadge:
    """Display label and colour variant for a status."""

    label: str
    variant: str  # default, info, warning, success or danger
