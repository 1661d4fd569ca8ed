"""
Scan event data model.

A ScanEvent is created each time an input surface's value changes or a
terminal key (Enter) is pressed. It is immutable and consumed by the
input classifier.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScanEvent:
    """
    One observation of an input surface's value.

    Attributes:
        input_id: Identifier of the input surface that produced the value
        raw_value: Current (trimmed) value of the surface
        timestamp: Monotonic clock reading in seconds
    """

    input_id: str
    raw_value: str
    timestamp: float
