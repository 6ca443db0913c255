"""
Trip routes. Access control happens upstream; routes only check existence.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from tripsplit.db.session import get_db
from tripsplit.models.trip import Trip
from tripsplit.schemas.trip import TripCreate, TripResponse

router = APIRouter(prefix="/trips", tags=["trips"])


def get_trip_or_404(trip_id: int, db: Session) -> Trip:
    """Return the trip or raise 404."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )
    return trip


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db)
):
    """Create a new trip."""
    new_trip = Trip(
        name=trip_data.name,
        base_currency=trip_data.base_currency
    )
    db.add(new_trip)
    db.commit()
    db.refresh(new_trip)
    
    return new_trip


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Get trip details."""
    return get_trip_or_404(trip_id, db)
