from fastapi import APIRouter, Body, Depends, Path, Request, Response
from typing import Annotated, Any, List
import logging

from expense_api.core.errors import NotFoundError
from expense_api.db.dal import MAX_EXPENSE_ID, Database
from expense_api.models.expense import ExpenseOut
from expense_api.services.expense_validation import (
    validate_expense_update,
    validate_new_expense,
)

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger("expense_api.expenses")

EXPENSE_NOT_FOUND = "Expense doesn't exist"

# Ids the store could never hold are rejected as 400 before reaching sqlite
ExpenseId = Annotated[
    int, Path(ge=1, le=MAX_EXPENSE_ID, description="Expense identifier")
]


# Dependencies -----------------------------------------------------


def get_db(request: Request) -> Database:
    return request.app.state.db


# Helpers ----------------------------------------------------------


def _require_expense(db: Database, expense_id: int) -> dict:
    row = db.get_expense(expense_id)
    if not row:
        raise NotFoundError(EXPENSE_NOT_FOUND)
    return row


# Routes -----------------------------------------------------------
@router.get("", response_model=List[ExpenseOut], summary="List all expenses")
async def list_expenses_endpoint(db: Database = Depends(get_db)):
    return [ExpenseOut(**r) for r in db.list_expenses()]


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Get one expense")
async def get_expense_endpoint(expense_id: ExpenseId, db: Database = Depends(get_db)):
    return ExpenseOut(**_require_expense(db, expense_id))


@router.post(
    "", response_model=ExpenseOut, status_code=201, summary="Create an expense"
)
async def create_expense(
    response: Response,
    payload: Any = Body(None),
    db: Database = Depends(get_db),
):
    # 1. Shape validation: required fields in fixed order, then per-field rules
    expense = validate_new_expense(payload)

    # 2. Persist; the store assigns expense_id and date
    row = db.insert_expense(expense.model_dump())
    logger.info("created expense %s", row["expense_id"])

    response.headers["Location"] = f"/expenses/{row['expense_id']}"
    return ExpenseOut(**row)


@router.patch("/{expense_id}", status_code=204, summary="Edit an expense (partial)")
async def patch_expense(
    expense_id: ExpenseId,
    payload: Any = Body(None),
    db: Database = Depends(get_db),
):
    # 1. Existence before body checks: an unknown id is a 404 whatever the body
    _require_expense(db, expense_id)

    # 2. At least one updatable field, each supplied one valid
    update = validate_expense_update(payload)

    # 3. Write only the supplied columns
    affected = db.update_expense(expense_id, update.model_dump(exclude_unset=True))
    if affected == 0:
        raise NotFoundError(EXPENSE_NOT_FOUND)
    logger.info("updated expense %s", expense_id)
    return Response(status_code=204)


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(expense_id: ExpenseId, db: Database = Depends(get_db)):
    if db.delete_expense(expense_id) == 0:
        raise NotFoundError(EXPENSE_NOT_FOUND)
    logger.info("deleted expense %s", expense_id)
    return Response(status_code=204)
