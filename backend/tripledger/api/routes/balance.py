"""
Balance calculation routes.
"""
from fastapi import APIRouter, HTTPException, status
from tripledger.core.utils import format_error
from tripledger.schemas.settlement import TripBalanceRequest, TripExpenseSummary
from tripledger.services.entity_service import validate_groupings
from tripledger.services.summary_service import build_trip_summary

router = APIRouter(prefix="/balance", tags=["balance"])


@router.post("/calculate", response_model=TripExpenseSummary)
async def calculate_trip_balance(request: TripBalanceRequest):
    """Calculate balances and suggested settlements for a trip."""
    if request.groups:
        problems = validate_groupings(
            request.groups,
            [p.participant_id for p in request.participants]
        )
        if problems:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=format_error("Invalid participant groups", problems)
            )
    
    return build_trip_summary(
        expenses=request.expenses,
        participants=request.participants,
        settled_settlements=request.settled_settlements,
        groups=request.groups,
        base_currency=request.base_currency,
    )
