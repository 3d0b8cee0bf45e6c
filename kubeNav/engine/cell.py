# kubeNav/engine/cell.py
"""
Table cells and the extractor type.

A Cell carries the text shown in a table and, optionally, a typed sort key, so that
quantity, size and age columns sort by magnitude instead of by their rendered text.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from kubernetes.utils import parse_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    text: str
    sort_key: Optional[Any] = None

    @classmethod
    def of(cls, value: Any) -> "Cell":
        """Plain text cell. ``None`` becomes an empty cell."""
        return cls("" if value is None else str(value))

    @classmethod
    def quantity(cls, value: Any) -> "Cell":
        """Kubernetes quantity (``100Mi``, ``1Gi``, ``250m``) sorted by its numeric value."""
        if value is None:
            return EMPTY_CELL
        text = str(value)
        try:
            return cls(text, parse_quantity(text))
        except (ValueError, TypeError, ArithmeticError):
            logger.debug(f"Unparsable quantity '{text}', sorting it as text")
            return cls(text)

    @classmethod
    def integer(cls, value: Optional[int]) -> "Cell":
        if value is None:
            return EMPTY_CELL
        return cls(str(value), Decimal(value))

    @classmethod
    def age(cls, created: Optional[datetime], now: Optional[datetime] = None) -> "Cell":
        """Age since ``created``, rendered like ``3d4h``, sorted by seconds."""
        if created is None:
            return EMPTY_CELL
        now = now or datetime.now(timezone.utc)
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        seconds = max(0, int((now - created).total_seconds()))
        return cls(format_duration(seconds), seconds)

    def __str__(self):
        return self.text


EMPTY_CELL = Cell("")

Extractor = Callable[[Any], Optional[Cell]]
ExtractorMap = Mapping[str, Extractor]


def format_duration(seconds: int) -> str:
    """Two most significant units: ``45s``, ``12m3s``, ``5h2m``, ``3d4h``."""
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d{hours}h" if hours else f"{days}d"
    if hours:
        return f"{hours}h{minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m{secs}s" if secs else f"{minutes}m"
    return f"{secs}s"
