"""
Financial API endpoints: incomes and expenses
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_

from app.api.deps import get_storage
from app.core.cache import invalidate_dashboard
from app.models import Income, Expense, PayerType
from app.models.financial import EXPENSE_CATEGORIES, PAYMENT_METHODS
from app.schemas.financial import (
    IncomeCreate,
    IncomeUpdate,
    IncomeResponse,
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
    ExpenseOptionsResponse,
)
from app.services.storage import StorageRepository, related_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Financial"])


def _income_response(income: Income) -> IncomeResponse:
    response = IncomeResponse.model_validate(income)
    response.patient_name = related_name(income.patient)
    return response


# ==================== Incomes ====================

@router.get("/incomes", response_model=List[IncomeResponse])
async def list_incomes(
    search: Optional[str] = Query(None, description="Patient name"),
    insurer: Optional[str] = Query(None, description="Insurer name or plan"),
    storage: StorageRepository = Depends(get_storage),
):
    """
    Incomes, most recent first
    """
    where = []
    if insurer and insurer.strip():
        term = f"%{insurer.strip()}%"
        where.append(or_(Income.insurer_name.ilike(term), Income.insurer_plan.ilike(term)))

    incomes = await storage.select("incomes", where=where, order_by="date", descending=True, load=["patient"])
    if search and search.strip():
        needle = search.strip().lower()
        incomes = [i for i in incomes if needle in (related_name(i.patient, "") or "").lower()]
    return [_income_response(i) for i in incomes]


@router.get("/incomes/insurers", response_model=List[str])
async def list_income_insurers(storage: StorageRepository = Depends(get_storage)):
    """
    Distinct insurer names seen on incomes, for the filter dropdown
    """
    incomes = await storage.select("incomes", where=[Income.insurer_name.isnot(None)])
    return sorted({i.insurer_name for i in incomes if i.insurer_name})


@router.post("/incomes", response_model=IncomeResponse, status_code=status.HTTP_201_CREATED)
async def create_income(
    income_in: IncomeCreate,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.get("patients", income_in.patient_id)
    [income] = await storage.insert("incomes", [income_in.model_dump()])
    await invalidate_dashboard()
    return _income_response(await storage.get("incomes", income.id, load=["patient"]))


@router.put("/incomes/{income_id}", response_model=IncomeResponse)
async def update_income(
    income_id: int,
    income_in: IncomeUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    patch = income_in.model_dump(exclude_unset=True)
    if patch.get("payer_type") == PayerType.INDIVIDUAL:
        patch["insurer_name"] = None
        patch["insurer_plan"] = None
    await storage.update("incomes", income_id, patch)
    await invalidate_dashboard()
    return _income_response(await storage.get("incomes", income_id, load=["patient"]))


@router.delete("/incomes/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_income(
    income_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.delete("incomes", income_id)
    await invalidate_dashboard()
    return None


# ==================== Expenses ====================

@router.get("/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    search: Optional[str] = Query(None, description="Description or category"),
    storage: StorageRepository = Depends(get_storage),
):
    where = []
    if search and search.strip():
        term = f"%{search.strip()}%"
        where.append(or_(Expense.description.ilike(term), Expense.category.ilike(term)))
    return await storage.select("expenses", where=where, order_by="date", descending=True)


@router.get("/expenses/options", response_model=ExpenseOptionsResponse)
async def expense_options():
    return ExpenseOptionsResponse(categories=EXPENSE_CATEGORIES, payment_methods=PAYMENT_METHODS)


@router.post("/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    storage: StorageRepository = Depends(get_storage),
):
    [expense] = await storage.insert("expenses", [expense_in.model_dump()])
    await invalidate_dashboard()
    return expense


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_in: ExpenseUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    expense = await storage.update("expenses", expense_id, expense_in.model_dump(exclude_unset=True))
    await invalidate_dashboard()
    return expense


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.delete("expenses", expense_id)
    await invalidate_dashboard()
    return None
