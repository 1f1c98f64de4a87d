"""
Project State (Data Model)
==========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the dimension chain, the callout layout and the
   background image reference in one place.
2. Persistence: This object is what gets serialized when saving a project.
3. Decoupling: Views read from this object; user actions write to it through
   the operations below, never by touching the lists directly.

Classes:
    ProjectState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional

from dimensionchain.model.dimensions import Anchor, DimensionEntry, next_anchor
from dimensionchain.model.errors import IndexOutOfRange, InvalidNumericInput
from dimensionchain.model.numeric import Valid, to_numeric
from dimensionchain.model.stackup import AggregateResult, compute_stackup

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("nominal", "tol_min", "tol_max")

# Names used by the project file and by older callers
FIELD_ALIASES = {
    "valeur": "nominal",
    "tolMin": "tol_min",
    "tolMax": "tol_max",
}


@dataclass
class ProjectState:
    """
    Holds the entire state of the open project.
    Pass this instance to the views.

    Not safe for concurrent mutation: there is no locking, one editor at a time.
    """
    entries: list[DimensionEntry] = field(default_factory=list)
    background_image: Optional[str] = None
    filepath: Optional[str] = None

    @classmethod
    def example(cls) -> ProjectState:
        """The two-dimension chain shown when the application starts."""
        return cls(entries=[
            DimensionEntry("L1", Valid(120.2), Valid(-0.1), Valid(0.1), Anchor(50.0, 100.0)),
            DimensionEntry("L2", Valid(40.0), Valid(-0.2), Valid(0.3), Anchor(200.0, 100.0)),
        ])

    # --- DERIVED DATA ---

    @property
    def anchors(self) -> list[Anchor]:
        """Callout positions, index-paired with 'entries'."""
        return [entry.anchor for entry in self.entries]

    @property
    def is_valid(self) -> bool:
        return all(entry.is_valid for entry in self.entries)

    @property
    def aggregate(self) -> Optional[AggregateResult]:
        """
        Stack-up of the current entries, recomputed on every read.
        None while any numeric field holds invalid text.
        """
        if not self.is_valid:
            return None
        return compute_stackup(self.entries)

    # --- ENTRY MANAGEMENT ---

    def add_entry(self) -> DimensionEntry:
        """Append a zero dimension named after its position, next to the last callout."""
        previous = self.entries[-1].anchor if self.entries else None
        entry = DimensionEntry(id=f"L{len(self.entries) + 1}", anchor=next_anchor(previous))
        self.entries.append(entry)
        logger.debug(f"Added dimension '{entry.id}' at ({entry.anchor.x}, {entry.anchor.y}).")
        return entry

    def update_field(self, index: int, field_name: str, value: object) -> None:
        """
        Set one field of the entry at 'index'.

        Numeric fields take a number or a text. Text that is not a finite number
        is stored as an invalid marker and InvalidNumericInput is raised.
        """
        entry = self.entries[self._check_index(index)]
        name = FIELD_ALIASES.get(field_name, field_name)

        if name == "id":
            entry.id = str(value)
            logger.debug(f"Dimension {index} renamed to '{entry.id}'.")
            return

        if name not in NUMERIC_FIELDS:
            raise ValueError(f"Unknown field '{field_name}'.")

        numeric = to_numeric(value)
        setattr(entry, name, numeric)

        if not numeric.is_valid:
            logger.warning(f"Invalid input for '{name}' of dimension '{entry.id}': {numeric.raw_text!r}")
            raise InvalidNumericInput(name, numeric.raw_text)

        if entry.is_inverted:
            logger.warning(
                f"Dimension '{entry.id}' has tol_min ({entry.tol_min.value}) "
                f"above tol_max ({entry.tol_max.value})."
            )
        logger.debug(f"Dimension '{entry.id}': {name} = {numeric.value}")

    def delete_entry(self, index: int) -> DimensionEntry:
        """Remove the dimension (and its callout) at 'index'."""
        entry = self.entries.pop(self._check_index(index))
        logger.debug(f"Deleted dimension '{entry.id}' (index {index}).")
        return entry

    # --- ANNOTATION LAYOUT ---

    def move_anchor(self, index: int, x: float, y: float) -> None:
        """Place the callout at 'index' at (x, y). Coordinates are not clamped."""
        entry = self.entries[self._check_index(index)]
        entry.anchor = Anchor(float(x), float(y))
        logger.debug(f"Moved callout of '{entry.id}' to ({entry.anchor.x}, {entry.anchor.y}).")

    def set_background_image(self, reference: Optional[str]) -> None:
        """Store an opaque reference to the backdrop image (None removes it)."""
        self.background_image = reference
        logger.info("Background image removed." if reference is None else "Background image set.")

    # --- LIFECYCLE ---

    def replace_contents(self, entries: list[DimensionEntry], background_image: Optional[str]) -> None:
        """Swap in a fully built chain at once (used by project loading)."""
        self.entries = entries
        self.background_image = background_image

    def reset(self) -> None:
        """Clear all data for a new project"""
        self.entries = []
        self.background_image = None
        self.filepath = None
        logger.info("Project state has been reset.")

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.entries):
            logger.error(f"Index {index} out of range ({len(self.entries)} dimensions).")
            raise IndexOutOfRange(index, len(self.entries))
        return index
