"""Positions JSON document: loading, parsing and saving."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from portfolio_tracker.core.exceptions import PositionsSourceError
from portfolio_tracker.domain.models import Position
from portfolio_tracker.schemas import PositionRecord

logger = logging.getLogger(__name__)


class PositionsFile:
    """
    Plaintext positions document (a JSON array of PascalCase records).

    The raw document is the source of truth for edits; typed Positions are
    derived from it per refresh cycle and never written back.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self.skipped: list[str] = []

    @property
    def path(self) -> Path:
        return self._path

    def load_document(self) -> list[dict[str, Any]]:
        """Read the raw ordered document. Raises PositionsSourceError."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise PositionsSourceError(f"Positions file not found: {self._path}")
        except OSError as exc:
            raise PositionsSourceError(f"Cannot read positions file {self._path}: {exc}")

        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PositionsSourceError(f"Positions file is not valid JSON: {exc}")

        if not isinstance(document, list):
            raise PositionsSourceError("Positions file must contain a JSON array")
        return document

    def load_positions(self) -> list[Position]:
        """
        Parse every record into a Position, in document order.

        A record that fails validation is skipped (and listed in `skipped`);
        the rest of the portfolio is still returned.
        """
        positions: list[Position] = []
        self.skipped = []
        for index, record in enumerate(self.load_document()):
            try:
                positions.append(PositionRecord.model_validate(record).to_domain())
            except PydanticValidationError as exc:
                label = (record.get("Name") or record.get("Ticker")) if isinstance(record, dict) else None
                message = f"Record {index} ({label or 'unnamed'}): {exc.error_count()} invalid field(s)"
                logger.warning("Skipping position %s", message)
                self.skipped.append(message)
        return positions

    def save_document(self, document: list[dict[str, Any]]) -> None:
        """Write the document back, replacing the file atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".positions-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False, allow_nan=False)
                f.write("\n")
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
