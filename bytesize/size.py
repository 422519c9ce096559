from __future__ import annotations

from dataclasses import dataclass

from bytesize.size_parser import parse_size
from bytesize.units import (
    BYTES_SUFFIX,
    GIGABYTE,
    KILOBYTE,
    MEGABYTE,
    PETABYTE,
    SUFFIX_BRACKETS,
    TERABYTE,
    wrap_int64,
)


@dataclass(frozen=True, order=True)
class Size:
    """A signed 64-bit count of bytes."""

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", wrap_int64(int(self.value)))

    @classmethod
    def parse(cls, text: str) -> "Size":
        return cls(parse_size(text))

    def bytes(self) -> int:
        return self.value

    def kilobytes(self) -> float:
        return self.value / KILOBYTE

    def megabytes(self) -> float:
        return self.value / MEGABYTE

    def gigabytes(self) -> float:
        return self.value / GIGABYTE

    def terabytes(self) -> float:
        return self.value / TERABYTE

    def petabytes(self) -> float:
        return self.value / PETABYTE

    def abs(self) -> "Size":
        # Size(-INT64_MIN) wraps back to INT64_MIN.
        if self.value < 0:
            return Size(-self.value)
        return self

    def __abs__(self) -> "Size":
        return self.abs()

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        magnitude = self.abs().value
        for threshold, suffix in SUFFIX_BRACKETS:
            if magnitude >= threshold:
                return f"{self.value / threshold:.2f} {suffix}"
        # No decimal places for plain bytes.
        return f"{self.value} {BYTES_SUFFIX}"


def format_size(num_bytes: int) -> str:
    return str(Size(num_bytes))
