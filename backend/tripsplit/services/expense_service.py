"""
Expense service for expense-related business logic.
"""
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional
from tripsplit.models.expense import Expense, ExpenseSplit
from tripsplit.models.member import TripMember
from tripsplit.schemas.expense import SplitCreate
from tripsplit.services.share_service import resolve_expense


class MemberNotInTrip(ValueError):
    """A payer or split member does not belong to the trip."""

    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} is not part of this trip")
        self.member_id = member_id


def ensure_trip_members(trip_id: int, member_ids: Iterable[int], db: Session):
    """Raise MemberNotInTrip for the first id that is not a member of the trip."""
    member_ids = list(dict.fromkeys(member_ids))
    if not member_ids:
        return
    found = {
        row.id for row in db.query(TripMember.id).filter(
            TripMember.trip_id == trip_id,
            TripMember.id.in_(member_ids)
        ).all()
    }
    for member_id in member_ids:
        if member_id not in found:
            raise MemberNotInTrip(member_id)


def _replace_splits(expense: Expense, splits: List[SplitCreate], db: Session):
    db.expire(expense, ["splits"])
    db.query(ExpenseSplit).filter(
        ExpenseSplit.expense_id == expense.id
    ).delete()
    db.flush()
    for split in splits:
        db.add(ExpenseSplit(
            expense_id=expense.id,
            member_id=split.member_id,
            share_type=split.share_type,
            share_value=split.share_value
        ))


def create_expense_with_splits(
    trip_id: int,
    payer_id: int,
    amount: int,
    splits: List[SplitCreate],
    description: Optional[str] = None,
    item_id: Optional[str] = None,
    db: Session = None
) -> Expense:
    """
    Create an expense with its split rows.

    The splits are resolved first so that a bill which cannot be divided is
    rejected before anything is written.
    """
    ensure_trip_members(trip_id, [payer_id] + [s.member_id for s in splits], db)

    expense = Expense(
        trip_id=trip_id,
        payer_id=payer_id,
        amount=amount,
        description=description,
        item_id=item_id
    )
    resolve_expense(expense, splits)

    db.add(expense)
    db.flush()
    _replace_splits(expense, splits, db)

    db.commit()
    db.refresh(expense)

    return expense


def update_expense(
    expense: Expense,
    db: Session,
    payer_id: Optional[int] = None,
    amount: Optional[int] = None,
    description: Optional[str] = None,
    item_id: Optional[str] = None,
    splits: Optional[List[SplitCreate]] = None,
    fields_set: Iterable[str] = ()
) -> Expense:
    """
    Apply a partial update. ``fields_set`` tells which nullable fields were
    sent explicitly so they can be cleared.
    """
    fields_set = set(fields_set)

    if payer_id is not None:
        ensure_trip_members(expense.trip_id, [payer_id], db)
        expense.payer_id = payer_id
    if amount is not None:
        expense.amount = amount
    if "description" in fields_set:
        expense.description = description
    if "item_id" in fields_set:
        expense.item_id = item_id

    if splits is not None:
        ensure_trip_members(expense.trip_id, [s.member_id for s in splits], db)
        resolve_expense(expense, splits)
        _replace_splits(expense, splits, db)
    else:
        # A new amount must still divide under the stored splits
        resolve_expense(expense, expense.splits)

    db.commit()
    db.refresh(expense)

    return expense


def expenses_split_with(member: TripMember, db: Session) -> List[int]:
    """Ids of expenses the member shares in but did not pay for."""
    rows = db.query(ExpenseSplit.expense_id).join(
        Expense, ExpenseSplit.expense_id == Expense.id
    ).filter(
        ExpenseSplit.member_id == member.id,
        Expense.payer_id != member.id
    ).all()
    return [row.expense_id for row in rows]


def check_expenses_still_divide(expense_ids: Iterable[int], db: Session):
    """
    Re-resolve expenses against their stored splits.

    Raises a SettlementError for the first expense that can no longer be
    divided. Pending changes must be flushed first.
    """
    expense_ids = list(expense_ids)
    if not expense_ids:
        return
    expenses = db.query(Expense).filter(
        Expense.id.in_(expense_ids)
    ).order_by(Expense.id).all()
    for expense in expenses:
        splits = db.query(ExpenseSplit).filter(
            ExpenseSplit.expense_id == expense.id
        ).order_by(ExpenseSplit.id).all()
        resolve_expense(expense, splits)
