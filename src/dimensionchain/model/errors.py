"""
Error Taxonomy
==============
Exceptions raised by the model layer. All of them are local and recoverable:
the project state is never left half-modified when one of them is raised.
"""
from __future__ import annotations


class DimensionChainError(Exception):
    """Base class for all model errors."""


class IndexOutOfRange(DimensionChainError, IndexError):
    """The caller passed an index that does not address an existing dimension."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Index {index} out of range for {length} dimension(s).")
        self.index = index
        self.length = length


class InvalidNumericInput(DimensionChainError, ValueError):
    """User-entered text could not be read as a finite number."""

    def __init__(self, field: str, raw_text: str) -> None:
        super().__init__(f"Invalid numeric value for '{field}': {raw_text!r}")
        self.field = field
        self.raw_text = raw_text


class MalformedProjectFile(DimensionChainError, ValueError):
    """The project payload is not a readable project document."""
