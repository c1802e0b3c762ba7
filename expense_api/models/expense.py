from __future__ import annotations
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic_core import PydanticCustomError

from expense_api.services.money import format_amount, parse_amount

# Error type for absent-looking values (null, blank); create reports these as missing
EMPTY_ERROR = "empty"
INVALID_ERROR = "invalid_field"
NO_FIELDS_ERROR = "no_fields"


def _present(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError(EMPTY_ERROR, "cannot be empty")
    return value


def text_value(value: Any) -> str:
    value = _present(value)
    if not isinstance(value, str):
        raise PydanticCustomError(INVALID_ERROR, "must be a string")
    return value


def amount_value(value: Any) -> str:
    value = _present(value)
    if not isinstance(value, (str, int, float)):
        raise PydanticCustomError(INVALID_ERROR, "must be a decimal string")
    try:
        return format_amount(parse_amount(value))
    except ValueError:
        raise PydanticCustomError(
            INVALID_ERROR,
            "must be a non-negative number with at most 2 decimal places",
        ) from None


def reference_value(value: Any) -> str:
    # type ids arrive as "3" or 3; both are stored as text
    value = _present(value)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise PydanticCustomError(
            INVALID_ERROR, "must be a string or integer identifier"
        )
    return text_value(str(value))


class ExpenseIn(BaseModel):
    """Fields accepted on creation, declared in the order they are checked.

    Unknown keys (``expense_id``, ``date``, typos) are ignored; id and
    timestamp are assigned by the store only.
    """

    name: str
    amount: str
    type_id: str
    category: str

    @field_validator("name", "category", mode="before")
    @classmethod
    def non_empty_text(cls, v: Any) -> str:
        return text_value(v)

    @field_validator("amount", mode="before")
    @classmethod
    def valid_amount(cls, v: Any) -> str:
        return amount_value(v)

    @field_validator("type_id", mode="before")
    @classmethod
    def valid_type_id(cls, v: Any) -> str:
        return reference_value(v)


class ExpenseUpdateIn(BaseModel):
    """Partial update model.

    All fields optional; at least one must be provided. Only the ones
    explicitly set are written (``model_dump(exclude_unset=True)``), and a
    supplied null is rejected rather than clearing the column.
    """

    name: Optional[str] = None
    amount: Optional[str] = None
    type_id: Optional[str] = None
    category: Optional[str] = None

    @field_validator("name", "category", mode="before")
    @classmethod
    def non_empty_text(cls, v: Any) -> str:
        return text_value(v)

    @field_validator("amount", mode="before")
    @classmethod
    def valid_amount(cls, v: Any) -> str:
        return amount_value(v)

    @field_validator("type_id", mode="before")
    @classmethod
    def valid_type_id(cls, v: Any) -> str:
        return reference_value(v)

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if not self.model_fields_set:
            raise PydanticCustomError(
                NO_FIELDS_ERROR,
                "Request body must contain either 'name', 'amount', 'type_id' or 'category'",
            )
        return self


class ExpenseOut(ExpenseIn):
    expense_id: int
    date: str  # ISO UTC timestamp as stored, e.g. 2026-10-19T12:00:00.123Z

    model_config = ConfigDict(from_attributes=True)


FIELD_NAMES = tuple(ExpenseIn.model_fields)
