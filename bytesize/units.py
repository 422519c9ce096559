from __future__ import annotations

BYTES_SUFFIX = "B"
KILOBYTES_SUFFIX = "KB"
MEGABYTES_SUFFIX = "MB"
GIGABYTES_SUFFIX = "GB"
TERABYTES_SUFFIX = "TB"
PETABYTES_SUFFIX = "PB"

KILOBYTE = 1024
MEGABYTE = 1024 * KILOBYTE
GIGABYTE = 1024 * MEGABYTE
TERABYTE = 1024 * GIGABYTE
PETABYTE = 1024 * TERABYTE

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# The trailing "B" is optional decoration: "K" and "KB" are the same unit.
UNIT_MULTIPLIERS = {
    "": 1,
    "B": 1,
    "K": KILOBYTE,
    "KB": KILOBYTE,
    "M": MEGABYTE,
    "MB": MEGABYTE,
    "G": GIGABYTE,
    "GB": GIGABYTE,
    "T": TERABYTE,
    "TB": TERABYTE,
    "P": PETABYTE,
    "PB": PETABYTE,
}

# Largest first; the formatter picks the first threshold the value reaches.
SUFFIX_BRACKETS = (
    (PETABYTE, PETABYTES_SUFFIX),
    (TERABYTE, TERABYTES_SUFFIX),
    (GIGABYTE, GIGABYTES_SUFFIX),
    (MEGABYTE, MEGABYTES_SUFFIX),
    (KILOBYTE, KILOBYTES_SUFFIX),
)

UNIT_SUFFIXES = (
    BYTES_SUFFIX,
    KILOBYTES_SUFFIX,
    MEGABYTES_SUFFIX,
    GIGABYTES_SUFFIX,
    TERABYTES_SUFFIX,
    PETABYTES_SUFFIX,
)


def wrap_int64(value: int) -> int:
    """Reduce value into the signed 64-bit range with two's-complement wraparound."""
    return ((value - INT64_MIN) % 2**64) + INT64_MIN
