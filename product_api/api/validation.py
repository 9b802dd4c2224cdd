# product_api/api/validation.py
"""
Request body checks for product create/update.

Rules run in a fixed order and the first failure wins; errors are not
aggregated. A rejected body never reaches the handler or the store.
"""
from __future__ import annotations
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Request

from product_api.core.errors import ApiError, validation_error

NAME_MESSAGE = "Product name is required and must be a string."
PRICE_MESSAGE = "Price must be a positive number."
CATEGORY_MESSAGE = "Category is required and must be a string."
BAD_JSON_MESSAGE = "Request body must be valid JSON."


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_positive_number(value: Any) -> bool:
    # bool is an int subclass; true/false are not prices
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # 1e400 parses to inf, a 400-digit integer does not fit a float; neither is a price
    try:
        return math.isfinite(float(value)) and value > 0
    except OverflowError:
        return False


# (field, check, message) in evaluation order
RULES: List[Tuple[str, Callable[[Any], bool], str]] = [
    ("name", _is_non_empty_str, NAME_MESSAGE),
    ("price", _is_positive_number, PRICE_MESSAGE),
    ("category", _is_non_empty_str, CATEGORY_MESSAGE),
]


def check_product_body(body: Dict[str, Any], *, partial: bool = False) -> Optional[ApiError]:
    """
    Returns the first failing rule as an ApiError, or None when the body passes.
    With partial=True (updates) a rule only applies if its field is present;
    an explicit null counts as present.
    """
    for field, check, message in RULES:
        if partial and field not in body:
            continue
        if not check(body.get(field)):
            return validation_error(message)
    return None


async def read_json_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError as e:
        raise validation_error(BAD_JSON_MESSAGE) from e
    return body if isinstance(body, dict) else {}


async def validate_product_create(request: Request) -> Dict[str, Any]:
    body = await read_json_body(request)
    if err := check_product_body(body):
        raise err
    return body


async def validate_product_update(request: Request) -> Dict[str, Any]:
    body = await read_json_body(request)
    if err := check_product_body(body, partial=True):
        raise err
    return body
