"""
Confidence value object

Represents a classifier confidence score between 0 and 100 (inclusive).
Immutable and self-validating.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from docsplit.constants import BOUNDARY_CONFIDENCE_THRESHOLD, CONFIDENCE_MAX, CONFIDENCE_MIN


@dataclass(frozen=True)
class Confidence:
    """
    Immutable integer confidence between 0 and 100.

    Automatically clamps values to the valid range.
    """
    value: int

    def __post_init__(self):
        """Validate and clamp confidence to [0, 100] range."""
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            object.__setattr__(self, 'value', CONFIDENCE_MIN)
        elif self.value < CONFIDENCE_MIN:
            object.__setattr__(self, 'value', CONFIDENCE_MIN)
        elif self.value > CONFIDENCE_MAX:
            object.__setattr__(self, 'value', CONFIDENCE_MAX)
        else:
            object.__setattr__(self, 'value', int(round(self.value)))

    @classmethod
    def from_raw(cls, raw_value: Any) -> Confidence:
        """
        Create Confidence from any value, coercing to valid range.

        Model output is untyped: numbers may arrive as strings, and some
        models answer on a 0..1 scale instead of 0..100.

        Examples:
            >>> Confidence.from_raw(85)
            Confidence(value=85)
            >>> Confidence.from_raw("92")
            Confidence(value=92)
            >>> Confidence.from_raw(0.75)
            Confidence(value=75)
            >>> Confidence.from_raw("null")
            Confidence(value=0)
            >>> Confidence.from_raw(150)
            Confidence(value=100)
        """
        if isinstance(raw_value, bool) or raw_value is None:
            return cls(CONFIDENCE_MIN)
        try:
            value = float(str(raw_value).strip()) if isinstance(raw_value, str) else float(raw_value)
        except (TypeError, ValueError):
            return cls(CONFIDENCE_MIN)
        if value != value:  # NaN
            return cls(CONFIDENCE_MIN)
        fractional = isinstance(raw_value, float) or (isinstance(raw_value, str) and "." in raw_value)
        if fractional and 0.0 < value <= 1.0:
            value *= 100.0
        return cls(value)

    def is_high(self, threshold: int = BOUNDARY_CONFIDENCE_THRESHOLD) -> bool:
        """True when strictly above ``threshold``."""
        return self.value > threshold

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
