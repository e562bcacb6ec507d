"""Purchase and amount edits applied as patches on the raw positions document."""

import logging
import math
from typing import Any, Optional, Sequence, Union

from portfolio_tracker.core.exceptions import ParseError, ValidationError
from portfolio_tracker.core.timezone import parse_date
from portfolio_tracker.repositories.positions_file import PositionsFile

logger = logging.getLogger(__name__)

PathKey = Union[int, str]


def _is_list_index(key: PathKey, node: list) -> bool:
    # Negative indices are rejected, never counted from the end
    return isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(node)


def _walk(document: Any, path: Sequence[PathKey]) -> Any:
    node = document
    for key in path:
        if isinstance(node, list) and not _is_list_index(key, node):
            raise ValidationError(f"No element at {'/'.join(str(k) for k in path)}")
        try:
            node = node[key]
        except (IndexError, KeyError, TypeError):
            raise ValidationError(f"No element at {'/'.join(str(k) for k in path)}")
    return node


def set_node(document: Any, path: Sequence[PathKey], value: Any) -> None:
    """Set the value at `path`, creating the last dict key if needed."""
    parent = _walk(document, path[:-1])
    key = path[-1]
    if isinstance(parent, list):
        if not _is_list_index(key, parent):
            raise ValidationError(f"Index {key} out of range")
    elif not isinstance(parent, dict):
        raise ValidationError(f"Cannot set {key} on a {type(parent).__name__}")
    parent[key] = value


def append_node(document: Any, path: Sequence[PathKey], value: Any) -> None:
    """Append to the list at `path`, creating it when the dict key is absent."""
    parent = _walk(document, path[:-1])
    key = path[-1]
    if isinstance(parent, dict) and key not in parent:
        parent[key] = []
    target = _walk(document, path)
    if not isinstance(target, list):
        raise ValidationError(f"{key} is not a list")
    target.append(value)


def delete_node(document: Any, path: Sequence[PathKey]) -> None:
    parent = _walk(document, path[:-1])
    _walk(document, path)
    del parent[path[-1]]


def _parse_number(text: Optional[str], label: str) -> Optional[float]:
    text = (text or "").strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(f"Invalid {label} format: {text}")
    if not math.isfinite(value):
        raise ValidationError(f"Invalid {label} format: {text}")
    return value


def validate_purchase(
    date_text: Optional[str],
    quantity_text: Optional[str],
    price_text: Optional[str] = None,
    fees_text: Optional[str] = None,
) -> dict[str, Any]:
    """
    Validate the fields of a purchase form and build its JSON record.

    Date and quantity are required; price and fees are optional.
    """
    date_text = (date_text or "").strip()
    if not date_text:
        raise ValidationError("Date is required")
    try:
        purchase_date = parse_date(date_text, field="purchase date")
    except ParseError:
        raise ValidationError(f"Invalid date format: {date_text}")

    if not (quantity_text or "").strip():
        raise ValidationError("Quantity is required")
    quantity = _parse_number(quantity_text, "quantity")
    if quantity <= 0:
        raise ValidationError(f"Quantity must be positive, got {quantity}")

    price = _parse_number(price_text, "price")
    if price is not None and price < 0:
        raise ValidationError(f"Price cannot be negative, got {price}")

    fees = _parse_number(fees_text, "fees")
    if fees is not None and fees < 0:
        raise ValidationError(f"Fees cannot be negative, got {fees}")

    record: dict[str, Any] = {"Date": purchase_date.isoformat(), "Quantity": quantity}
    if price is not None:
        record["Price"] = price
    if fees is not None:
        record["Fees"] = fees
    return record


def validate_amount(amount_text: Optional[str]) -> float:
    if not (amount_text or "").strip():
        raise ValidationError("Amount is required")
    amount = _parse_number(amount_text, "amount")
    if amount < 0:
        raise ValidationError(f"Amount cannot be negative, got {amount}")
    return amount


class PurchaseEditor:
    """
    Applies user edits to the positions document.

    Edits patch the raw JSON tree by index, so fields the typed model does
    not know about are preserved on save.
    """

    def __init__(self, positions_file: PositionsFile):
        self._file = positions_file

    def add_purchase(
        self,
        position_index: int,
        date_text: str,
        quantity_text: str,
        price_text: Optional[str] = None,
        fees_text: Optional[str] = None,
    ) -> dict[str, Any]:
        record = validate_purchase(date_text, quantity_text, price_text, fees_text)
        document = self._file.load_document()
        self._require_security(document, position_index)
        append_node(document, [position_index, "Purchases"], record)
        self._file.save_document(document)
        logger.info("Added purchase to position %d", position_index)
        return record

    def edit_purchase(
        self,
        position_index: int,
        purchase_index: int,
        date_text: str,
        quantity_text: str,
        price_text: Optional[str] = None,
        fees_text: Optional[str] = None,
    ) -> dict[str, Any]:
        record = validate_purchase(date_text, quantity_text, price_text, fees_text)
        document = self._file.load_document()
        existing = _walk(document, [position_index, "Purchases", purchase_index])
        if not isinstance(existing, dict):
            raise ValidationError(f"Purchase {purchase_index} is not an object")
        # Keep unknown keys of the existing lot; optional fields left empty are removed
        for key in ("Price", "Fees"):
            if key not in record:
                existing.pop(key, None)
        existing.update(record)
        self._file.save_document(document)
        logger.info("Edited purchase %d of position %d", purchase_index, position_index)
        return existing

    def delete_purchase(self, position_index: int, purchase_index: int) -> None:
        document = self._file.load_document()
        delete_node(document, [position_index, "Purchases", purchase_index])
        self._file.save_document(document)
        logger.info("Deleted purchase %d of position %d", purchase_index, position_index)

    def set_amount(self, position_index: int, amount_text: str) -> float:
        amount = validate_amount(amount_text)
        document = self._file.load_document()
        set_node(document, [position_index, "Amount"], amount)
        self._file.save_document(document)
        logger.info("Set amount of position %d to %s", position_index, amount)
        return amount

    @staticmethod
    def _require_security(document: list[dict[str, Any]], position_index: int) -> None:
        record = _walk(document, [position_index])
        if not isinstance(record, dict) or not record.get("Ticker"):
            raise ValidationError("Purchases can only be added to ticker-backed positions")
