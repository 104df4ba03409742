"""AspectRatio value object reduced to lowest terms."""

from __future__ import annotations

from dataclasses import dataclass

from vidshot.core.exceptions import InvalidDimensionsError


def gcd(a: int, b: int) -> int:
    """Euclid's greatest common divisor."""
    while b:
        a, b = b, a % b
    return a


@dataclass(frozen=True)
class AspectRatio:
    """Immutable width:height pair of positive integers in lowest terms."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensionsError(self.width, self.height)
        divisor = gcd(self.width, self.height)
        if divisor != 1:
            object.__setattr__(self, "width", self.width // divisor)
            object.__setattr__(self, "height", self.height // divisor)

    @classmethod
    def from_dimensions(cls, width: int, height: int) -> AspectRatio:
        return cls(width=int(width), height=int(height))

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width}:{self.height}"
