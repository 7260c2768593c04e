"""Parsing of recognised receipt text into candidate items."""

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from .exceptions import ReceiptParseError
from .models import ReceiptCandidate

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def parse_price(value: Any) -> Decimal:
    """
    Coerce a price value to Decimal.

    Numbers are taken as-is, strings are parsed, anything unparseable or
    non-finite becomes zero so the item can still be corrected by hand.
    """
    price = Decimal("0")
    if isinstance(value, bool):
        return price
    if isinstance(value, int | float):
        price = Decimal(str(value))
    elif isinstance(value, str):
        try:
            price = Decimal(value.strip())
        except InvalidOperation:
            logger.debug(f"Unparseable price {value!r}, using 0")

    if not price.is_finite():
        logger.debug(f"Non-finite price {value!r}, using 0")
        return Decimal("0")
    return price


def parse_receipt_items(
    text: str, default_name: str = "New item"
) -> list[ReceiptCandidate]:
    """
    Parse receipt recognition output into candidate items.

    Accepts a JSON array of {"name": ..., "price": ...} objects, optionally
    wrapped in Markdown code fences or surrounded by prose.

    Args:
        text: Raw response text
        default_name: Name for items without one

    Returns:
        Candidate items in receipt order

    Raises:
        ReceiptParseError: If no JSON array can be recovered from the text
    """
    if not text or not text.strip():
        return []

    cleaned = _CODE_FENCE.sub("", text).strip()

    try:
        raw_items = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning("Direct JSON parse failed, attempting array extraction")
        match = _JSON_ARRAY.search(text)
        if not match:
            raise ReceiptParseError(
                "Could not find a JSON array in receipt text", raw_text=text
            ) from None
        try:
            raw_items = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ReceiptParseError(
                f"Could not parse receipt text as JSON: {e}", raw_text=text
            ) from e

    if not isinstance(raw_items, list):
        raise ReceiptParseError("Receipt items must be a JSON array", raw_text=text)

    candidates = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise ReceiptParseError(
                f"Receipt item must be an object, got {type(raw).__name__}",
                raw_text=text,
            )
        candidates.append(
            ReceiptCandidate(
                name=str(raw.get("name") or default_name),
                price=parse_price(raw.get("price")),
            )
        )

    logger.info(f"Parsed {len(candidates)} receipt items")
    return candidates
