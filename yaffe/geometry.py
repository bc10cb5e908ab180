"""Logical and physical coordinates and rectangles used for layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class LogicalPosition:
    """A position (or size) in scale-independent logical units."""

    x: float
    y: float

    def to_physical(self, scale_factor: float) -> "PhysicalPosition":
        """Convert to physical pixels using ``scale_factor``."""
        return PhysicalPosition(self.x * scale_factor, self.y * scale_factor)

    def __add__(self, other: object) -> "LogicalPosition":
        if not isinstance(other, LogicalPosition):
            return NotImplemented
        return LogicalPosition(self.x + other.x, self.y + other.y)

    def __sub__(self, other: object) -> "LogicalPosition":
        if not isinstance(other, LogicalPosition):
            return NotImplemented
        return LogicalPosition(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "LogicalPosition":
        return LogicalPosition(self.x * factor, self.y * factor)

    def __truediv__(self, divisor: float) -> "LogicalPosition":
        return LogicalPosition(self.x / divisor, self.y / divisor)


LogicalSize = LogicalPosition


@dataclass(frozen=True)
class PhysicalPosition:
    """A position (or size) in physical pixels."""

    x: float
    y: float

    def to_logical(self, scale_factor: float) -> LogicalPosition:
        """Convert to logical units using ``scale_factor``."""
        return LogicalPosition(self.x / scale_factor, self.y / scale_factor)

    @classmethod
    def from_logical(
        cls,
        logical: Union[LogicalPosition, Tuple[float, float]],
        scale_factor: float,
    ) -> "PhysicalPosition":
        """Build a physical position from a logical one or an ``(x, y)`` pair."""
        if not isinstance(logical, LogicalPosition):
            logical = LogicalPosition(*logical)
        return logical.to_physical(scale_factor)


PhysicalSize = PhysicalPosition


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in logical units."""

    top_left: LogicalPosition
    bottom_right: LogicalPosition

    @property
    def left(self) -> float:
        return self.top_left.x

    @property
    def right(self) -> float:
        return self.bottom_right.x

    @property
    def top(self) -> float:
        return self.top_left.y

    @property
    def bottom(self) -> float:
        return self.bottom_right.y

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y

    @property
    def size(self) -> LogicalPosition:
        return LogicalPosition(self.width, self.height)

    @classmethod
    def from_tuples(
        cls, top_left: Tuple[float, float], bottom_right: Tuple[float, float]
    ) -> "Rect":
        """Build a rectangle from two ``(x, y)`` pairs."""
        return cls(LogicalPosition(*top_left), LogicalPosition(*bottom_right))

    @classmethod
    def point_and_size(cls, pos: LogicalPosition, size: LogicalPosition) -> "Rect":
        """Build a rectangle from its top-left corner and its size."""
        return cls(pos, pos + size)

    @classmethod
    def percent(cls, parent: "Rect", percent: LogicalPosition) -> "Rect":
        """A rectangle anchored at ``parent``'s top-left covering a fraction of it."""
        pos = parent.top_left
        size = parent.size
        return cls(pos, pos + LogicalPosition(size.x * percent.x, size.y * percent.y))

    def to_physical(self, scale_factor: float) -> Tuple[PhysicalPosition, PhysicalPosition]:
        """Return the physical top-left and bottom-right corners."""
        return (
            self.top_left.to_physical(scale_factor),
            self.bottom_right.to_physical(scale_factor),
        )