from __future__ import annotations


class InvalidSize(ValueError):
    """Input does not match the size grammar or its number cannot be read."""

    def __init__(self, text: str, message: str | None = None) -> None:
        self.text = text
        super().__init__(message or f"invalid size: {text}")


class InvalidSizeSuffix(InvalidSize):
    def __init__(self, suffix: str, text: str = "") -> None:
        self.suffix = suffix
        super().__init__(text, f"invalid size suffix: {suffix}")
