"""
Input/Output Manager (JSON)
Handles saving and loading the ProjectState to .json project files.

File layout:
    {
        "cotes": [{"id": "L1", "valeur": 120.2, "tolMin": -0.1, "tolMax": 0.1}, ...],
        "imageSrc": "data:image/png;base64,..." | null,
        "positions": [{"x": 50, "y": 100}, ...]
    }
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import mimetypes
import os
from enum import StrEnum
from typing import Any, Optional, Union

from dimensionchain.config import DEFAULT_IMPORT_POLICY
from dimensionchain.model.dimensions import Anchor, DimensionEntry, next_anchor
from dimensionchain.model.errors import MalformedProjectFile
from dimensionchain.model.numeric import Invalid, NumericValue, Valid, finite_float, to_numeric
from dimensionchain.model.state import ProjectState

# Get module logger
logger = logging.getLogger(__name__)


class ImportPolicy(StrEnum):
    LENIENT = "lenient"
    STRICT = "strict"


class IOManager:

    @staticmethod
    def export_project(state: ProjectState) -> bytes:
        """Serialize the project to a UTF-8 JSON document."""
        data = {
            "cotes": [entry.to_dict() for entry in state.entries],
            "imageSrc": state.background_image,
            "positions": [anchor.to_dict() for anchor in state.anchors],
        }
        payload = json.dumps(data, ensure_ascii=False, indent=2, allow_nan=False).encode("utf-8")
        logger.debug(f"Exported {len(state.entries)} dimension(s), {len(payload)} bytes.")
        return payload

    @staticmethod
    def import_project(
        state: ProjectState,
        payload: Union[bytes, str],
        policy: Union[ImportPolicy, str] = DEFAULT_IMPORT_POLICY,
    ) -> ProjectState:
        """
        Replace the project contents with the parsed payload.

        The new chain is fully built before it is swapped in: on
        MalformedProjectFile the state is left untouched.
        """
        policy = ImportPolicy(policy)
        data = IOManager._parse_document(payload)

        if policy == ImportPolicy.STRICT:
            entries, image = IOManager._read_strict(data)
        else:
            entries, image = IOManager._read_lenient(data)

        state.replace_contents(entries, image)
        logger.info(f"Imported {len(entries)} dimension(s) ({policy} policy).")
        return state

    @staticmethod
    def save_project(state: ProjectState, filepath: str) -> None:
        logger.info(f"Saving project to: {filepath}")
        try:
            payload = IOManager.export_project(state)
            with open(filepath, "wb") as f:
                f.write(payload)
            state.filepath = filepath
            logger.info(f"Project saved to: {filepath}")

        except Exception as e:
            logger.exception(f"Failed to save project: {e}")
            raise e

    @staticmethod
    def load_project(
        state: ProjectState,
        filepath: str,
        policy: Union[ImportPolicy, str] = DEFAULT_IMPORT_POLICY,
    ) -> None:
        logger.info(f"Loading project from: {filepath}")
        if not os.path.isfile(filepath):
            msg = f"File '{filepath}' does not exist."
            logger.error(msg)
            raise FileNotFoundError(msg)

        try:
            with open(filepath, "rb") as f:
                payload = f.read()
            IOManager.import_project(state, payload, policy)
            state.filepath = filepath
            logger.info(f"Project loaded from: {filepath}")

        except Exception as e:
            logger.exception(f"Failed to load project: {e}")
            raise e

    # --- BACKGROUND IMAGE HELPERS ---

    @staticmethod
    def image_to_data_url(filepath: str) -> str:
        """Embed an image file as a 'data:' reference. The bytes are not inspected."""
        mime, _ = mimetypes.guess_type(filepath)
        with open(filepath, "rb") as f:
            encoded = base64.b64encode(f.read()).decode("ascii")
        logger.debug(f"Embedded image '{filepath}' ({mime or 'unknown type'}).")
        return f"data:{mime or 'application/octet-stream'};base64,{encoded}"

    @staticmethod
    def resolve_image_bytes(reference: Optional[str]) -> Optional[bytes]:
        """Raw bytes behind a background reference (data URL or file path), if reachable."""
        if not reference:
            return None

        if reference.startswith("data:"):
            header, sep, body = reference.partition(",")
            if not sep or not header.endswith(";base64"):
                logger.warning("Background image reference is not a base64 data URL.")
                return None
            try:
                return base64.b64decode(body, validate=True)
            except binascii.Error as e:
                logger.warning(f"Could not decode background image: {e}")
                return None

        if os.path.isfile(reference):
            with open(reference, "rb") as f:
                return f.read()

        logger.warning(f"Background image not found: {reference}")
        return None

    # --- PARSING HELPERS ---

    @staticmethod
    def _parse_document(payload: Union[bytes, str]) -> dict[str, Any]:
        try:
            text = payload.decode("utf-8") if isinstance(payload, (bytes, bytearray)) else payload
            data = json.loads(text)
        # ValueError covers JSONDecodeError, bad UTF-8 and over-long integer literals
        except (ValueError, RecursionError) as e:
            logger.error(f"Project file is not valid JSON: {e}")
            raise MalformedProjectFile(f"Project file is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            msg = f"Project file must contain a JSON object, got {type(data).__name__}."
            logger.error(msg)
            raise MalformedProjectFile(msg)
        return data

    @staticmethod
    def _read_lenient(data: dict[str, Any]) -> tuple[list[DimensionEntry], Optional[str]]:
        """Missing or mistyped sections fall back to empty; bad values become invalid markers."""
        raw_cotes = data.get("cotes")
        if not isinstance(raw_cotes, list):
            if raw_cotes is not None:
                logger.warning("'cotes' is not a list, ignoring it.")
            raw_cotes = []

        raw_positions = data.get("positions")
        if not isinstance(raw_positions, list):
            if raw_positions is not None:
                logger.warning("'positions' is not a list, ignoring it.")
            raw_positions = []

        image = data.get("imageSrc")
        if not isinstance(image, str) or not image:
            image = None

        if len(raw_positions) != len(raw_cotes):
            logger.warning(
                f"{len(raw_cotes)} dimension(s) but {len(raw_positions)} position(s): "
                f"padding missing callouts, dropping extra ones."
            )

        entries: list[DimensionEntry] = []
        previous: Optional[Anchor] = None
        # Positions pair with the raw index, so skipped items keep the rest aligned
        for i, cote in enumerate(raw_cotes):
            if not isinstance(cote, dict):
                logger.warning(f"Skipped malformed dimension at index {i}.")
                continue

            raw_pos = raw_positions[i] if i < len(raw_positions) else None
            anchor = IOManager._read_anchor(raw_pos) or next_anchor(previous)
            raw_id = cote.get("id")
            entry = DimensionEntry(
                id=f"L{len(entries) + 1}" if raw_id is None else str(raw_id),
                nominal=IOManager._read_value(cote.get("valeur")),
                tol_min=IOManager._read_value(cote.get("tolMin")),
                tol_max=IOManager._read_value(cote.get("tolMax")),
                anchor=anchor,
            )
            if not entry.is_valid:
                logger.warning(f"Dimension '{entry.id}' has invalid field(s): {entry.invalid_fields}")
            entries.append(entry)
            previous = anchor

        return entries, image

    @staticmethod
    def _read_strict(data: dict[str, Any]) -> tuple[list[DimensionEntry], Optional[str]]:
        """Every section present and well-typed, or MalformedProjectFile."""
        def reject(msg: str) -> MalformedProjectFile:
            logger.error(msg)
            return MalformedProjectFile(msg)

        cotes = data.get("cotes")
        positions = data.get("positions")
        image = data.get("imageSrc")

        if not isinstance(cotes, list):
            raise reject("'cotes' must be a list.")
        if not isinstance(positions, list):
            raise reject("'positions' must be a list.")
        if len(cotes) != len(positions):
            raise reject(f"{len(cotes)} dimension(s) but {len(positions)} position(s).")
        if image is not None and not isinstance(image, str):
            raise reject("'imageSrc' must be a string or null.")

        entries: list[DimensionEntry] = []
        for i, (cote, pos) in enumerate(zip(cotes, positions)):
            if not isinstance(cote, dict) or not isinstance(cote.get("id"), str):
                raise reject(f"Dimension {i} must be an object with a string 'id'.")
            values = [finite_float(cote.get(key)) for key in ("valeur", "tolMin", "tolMax")]
            for key, value in zip(("valeur", "tolMin", "tolMax"), values):
                if value is None:
                    raise reject(f"Dimension {i}: '{key}' must be a finite number.")
            anchor = IOManager._read_anchor(pos)
            if anchor is None:
                raise reject(f"Position {i} must be an object with finite numeric 'x' and 'y'.")

            nominal, tol_min, tol_max = values
            entries.append(DimensionEntry(
                id=cote["id"],
                nominal=Valid(nominal),
                tol_min=Valid(tol_min),
                tol_max=Valid(tol_max),
                anchor=anchor,
            ))

        return entries, image or None

    @staticmethod
    def _read_anchor(raw: Any) -> Optional[Anchor]:
        if not isinstance(raw, dict):
            return None
        x, y = finite_float(raw.get("x")), finite_float(raw.get("y"))
        if x is None or y is None:
            return None
        return Anchor(x, y)

    @staticmethod
    def _read_value(raw: Any) -> NumericValue:
        if raw is None:
            return Invalid("")
        if isinstance(raw, (list, dict)):
            return Invalid(json.dumps(raw))
        return to_numeric(raw)
