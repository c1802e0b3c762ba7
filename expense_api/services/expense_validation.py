"""Request body validation for expense create / update.

The field rules live on the pydantic models (``ExpenseIn``,
``ExpenseUpdateIn``). This module runs them and turns the first failure into
a ``ValidationError`` with the message clients see. Pydantic reports field
errors in declaration order, so a body missing both ``name`` and ``amount``
always reports ``name``. On create, a missing field anywhere wins over an
invalid one earlier in the order.
"""

from __future__ import annotations
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from expense_api.core.errors import ValidationError
from expense_api.models.expense import (
    EMPTY_ERROR,
    FIELD_NAMES,
    ExpenseIn,
    ExpenseUpdateIn,
)

__all__ = ["FIELD_NAMES", "validate_new_expense", "validate_expense_update"]

MISSING_ERRORS = {"missing", EMPTY_ERROR}
NOT_AN_OBJECT = "Request body must be a JSON object"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _first_message(errors: List[Dict[str, Any]], report_missing: bool) -> str:
    for err in errors:
        if not err["loc"]:
            # model-level: body not an object, or no updatable field
            if err["type"] == "model_type":
                return NOT_AN_OBJECT
            return err["msg"]
    if report_missing:
        for err in errors:
            if err["type"] in MISSING_ERRORS:
                return f"Missing '{err['loc'][0]}' in request body"
    err = errors[0]
    return f"'{err['loc'][0]}' {err['msg']}"


def _validate(model: Type[ModelT], body: Any, report_missing: bool) -> ModelT:
    try:
        return model.model_validate(body if body is not None else {})
    except PydanticValidationError as e:
        raise ValidationError(_first_message(e.errors(), report_missing)) from None


def validate_new_expense(body: Any) -> ExpenseIn:
    """Validate a create body; every declared field is required."""
    return _validate(ExpenseIn, body, report_missing=True)


def validate_expense_update(body: Any) -> ExpenseUpdateIn:
    """Validate a partial update body; at least one declared field is required."""
    return _validate(ExpenseUpdateIn, body, report_missing=False)
