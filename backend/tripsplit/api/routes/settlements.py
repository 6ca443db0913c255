"""
Settlement routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from tripsplit.core.exceptions import InternalInconsistency, SettlementError
from tripsplit.core.utils import format_error
from tripsplit.db.session import get_db
from tripsplit.schemas.member import MemberResponse
from tripsplit.schemas.settlement import (
    SettlementSummaryResponse, MemberBalanceResponse, TransferResponse
)
from tripsplit.services.settlement_service import build_summary_text, calculate_settlement
from tripsplit.api.routes.trips import get_trip_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips/{trip_id}/settlement", tags=["settlement"])


@router.get("", response_model=SettlementSummaryResponse)
async def get_settlement(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Compute who owes whom for a trip. Always recomputed from current data."""
    trip = get_trip_or_404(trip_id, db)
    
    try:
        result = calculate_settlement(trip_id, db)
    except SettlementError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=format_error(e.message, e.details())
        )
    except InternalInconsistency as e:
        logger.error(f"Settlement for trip {trip_id} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=format_error("Settlement could not be computed consistently")
        )
    
    names = result.member_names()
    return SettlementSummaryResponse(
        members=[MemberResponse.model_validate(member) for member in result.members],
        balances=[
            MemberBalanceResponse(
                member_id=b.member_id,
                member_name=b.member_name,
                total_paid=b.total_paid,
                total_owed=b.total_owed,
                balance=b.balance
            )
            for b in result.balances
        ],
        settlements=[
            TransferResponse(
                from_member_id=t.from_member_id,
                from_name=names.get(t.from_member_id, ""),
                to_member_id=t.to_member_id,
                to_name=names.get(t.to_member_id, ""),
                amount=t.amount
            )
            for t in result.settlements
        ],
        total_expenses=result.total_expenses,
        currency=trip.base_currency,
        summary=build_summary_text(result, trip.base_currency)
    )
