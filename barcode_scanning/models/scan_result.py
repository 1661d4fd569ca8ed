"""
Outcome of one resolve() call.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ScanResult:
    """
    Result of resolving a code.

    Exactly one of ``item`` / ``error`` is set unless the call was dropped
    because another resolution already owned the surface.

    Attributes:
        code: Code as passed by the caller
        item: Resolved item on success
        error: Terminal error on failure
        from_cache: True when served from the TTL cache
        dropped: True when the single-flight guard dropped the call
    """

    code: str
    item: Optional[Any] = None
    error: Optional[BaseException] = None
    from_cache: bool = False
    dropped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.dropped
