"""
Expense management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
from typing import List
from tripsplit.core.exceptions import SettlementError
from tripsplit.core.utils import format_error
from tripsplit.db.session import get_db
from tripsplit.models.expense import Expense, ExpenseSplit
from tripsplit.schemas.expense import (
    ExpenseCreate, ExpenseUpdate, ExpenseResponse, SplitResponse,
    ExpensePreview, ExpensePreviewResponse, ShareItem
)
from tripsplit.services.expense_service import (
    MemberNotInTrip, create_expense_with_splits, ensure_trip_members, update_expense as apply_expense_update
)
from tripsplit.services.share_service import resolve_expense
from tripsplit.api.routes.trips import get_trip_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


def settlement_error_to_http(e: SettlementError) -> HTTPException:
    """Map a rejected split or amount to a 422 response."""
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=format_error(e.message, e.details())
    )


def member_error_to_http(e: MemberNotInTrip) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=format_error(str(e), {"memberId": e.member_id})
    )


def _load_expense(trip_id: int, expense_id: int, db: Session) -> Expense:
    expense = db.query(Expense).options(
        joinedload(Expense.payer),
        joinedload(Expense.splits).joinedload(ExpenseSplit.member)
    ).filter(
        Expense.id == expense_id,
        Expense.trip_id == trip_id
    ).first()
    
    if not expense:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )
    return expense


def build_expense_response(expense: Expense) -> ExpenseResponse:
    """Build the response with payer and member names."""
    split_responses = []
    for split in expense.splits:
        split_responses.append(SplitResponse(
            id=split.id,
            member_id=split.member_id,
            member_name=split.member.name,
            share_type=split.share_type,
            share_value=split.share_value
        ))
    
    return ExpenseResponse(
        id=expense.id,
        trip_id=expense.trip_id,
        payer_id=expense.payer_id,
        payer_name=expense.payer.name,
        amount=expense.amount,
        item_id=expense.item_id,
        description=expense.description,
        splits=split_responses,
        created_at=expense.created_at
    )


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List all expenses for a trip with their splits."""
    get_trip_or_404(trip_id, db)
    
    expenses = db.query(Expense).options(
        joinedload(Expense.payer),
        joinedload(Expense.splits).joinedload(ExpenseSplit.member)
    ).filter(
        Expense.trip_id == trip_id
    ).order_by(Expense.id).all()
    
    return [build_expense_response(expense) for expense in expenses]


@router.post("/preview", response_model=ExpensePreviewResponse)
async def preview_expense_shares(
    trip_id: int,
    preview: ExpensePreview,
    db: Session = Depends(get_db)
):
    """Compute each member's share of an unsaved expense."""
    get_trip_or_404(trip_id, db)
    
    try:
        ensure_trip_members(trip_id, [s.member_id for s in preview.splits], db)
        owed = resolve_expense(preview, preview.splits)
    except MemberNotInTrip as e:
        raise member_error_to_http(e)
    except SettlementError as e:
        raise settlement_error_to_http(e)
    
    return ExpensePreviewResponse(
        amount=preview.amount,
        shares=[ShareItem(member_id=member_id, amount=amount) for member_id, amount in owed.items()]
    )


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Create a new expense with its splits."""
    get_trip_or_404(trip_id, db)
    
    try:
        new_expense = create_expense_with_splits(
            trip_id=trip_id,
            payer_id=expense_data.payer_id,
            amount=expense_data.amount,
            splits=expense_data.splits,
            description=expense_data.description,
            item_id=expense_data.item_id,
            db=db
        )
    except MemberNotInTrip as e:
        db.rollback()
        raise member_error_to_http(e)
    except SettlementError as e:
        db.rollback()
        raise settlement_error_to_http(e)
    
    logger.info(f"Created expense {new_expense.id} of {new_expense.amount} in trip {trip_id}")
    return build_expense_response(_load_expense(trip_id, new_expense.id, db))


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    trip_id: int,
    expense_id: int,
    expense_data: ExpenseUpdate,
    db: Session = Depends(get_db)
):
    """Update an expense. Sending splits replaces all of them."""
    get_trip_or_404(trip_id, db)
    expense = _load_expense(trip_id, expense_id, db)
    
    try:
        apply_expense_update(
            expense,
            db,
            payer_id=expense_data.payer_id,
            amount=expense_data.amount,
            description=expense_data.description,
            item_id=expense_data.item_id,
            splits=expense_data.splits,
            fields_set=expense_data.model_fields_set
        )
    except MemberNotInTrip as e:
        db.rollback()
        raise member_error_to_http(e)
    except SettlementError as e:
        db.rollback()
        raise settlement_error_to_http(e)
    
    db.expire_all()
    return build_expense_response(_load_expense(trip_id, expense_id, db))


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    trip_id: int,
    expense_id: int,
    db: Session = Depends(get_db)
):
    """Delete an expense and its splits."""
    get_trip_or_404(trip_id, db)
    expense = _load_expense(trip_id, expense_id, db)
    
    db.delete(expense)
    db.commit()
