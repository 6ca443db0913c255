"""
Trip member routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.core.exceptions import SettlementError
from tripsplit.core.utils import format_error
from tripsplit.db.session import get_db
from tripsplit.models.member import TripMember
from tripsplit.schemas.member import MemberCreate, MemberResponse
from tripsplit.services.expense_service import check_expenses_still_divide, expenses_split_with
from tripsplit.api.routes.trips import get_trip_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips/{trip_id}/members", tags=["members"])


@router.get("", response_model=List[MemberResponse])
async def list_members(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List trip members in the order they were added."""
    get_trip_or_404(trip_id, db)
    
    return db.query(TripMember).filter(
        TripMember.trip_id == trip_id
    ).order_by(TripMember.id).all()


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    trip_id: int,
    member_data: MemberCreate,
    db: Session = Depends(get_db)
):
    """Add a member (account holder or guest) to the trip."""
    get_trip_or_404(trip_id, db)
    
    member = TripMember(
        trip_id=trip_id,
        user_id=member_data.user_id,
        name=member_data.name
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    
    return member


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    trip_id: int,
    member_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a member along with the expenses they paid and their splits.

    Refused with 409 if removing their shares would leave another expense
    that can no longer be divided.
    """
    get_trip_or_404(trip_id, db)
    
    member = db.query(TripMember).filter(
        TripMember.id == member_id,
        TripMember.trip_id == trip_id
    ).first()
    
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found"
        )
    
    affected = expenses_split_with(member, db)
    logger.info(f"Deleting member {member_id} from trip {trip_id} with {len(member.expenses_paid)} paid expenses")
    db.delete(member)
    db.flush()
    
    try:
        check_expenses_still_divide(affected, db)
    except SettlementError as e:
        db.rollback()
        logger.info(f"Refused to delete member {member_id}: expense {e.expense_id} would not divide")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=format_error(
                f"Removing this member leaves expense {e.expense_id} unbalanced: {e.message}",
                e.details()
            )
        )
    
    db.commit()
