"""
Settlement suggestion routes.
"""
from fastapi import APIRouter, HTTPException, status
from typing import List
from tripledger.schemas.settlement import (
    PersistedSettlement,
    Settlement,
    SplitEntitySettlementRequest,
    SuggestRequest,
)
from tripledger.services.entity_service import split_entity_settlement
from tripledger.services.settlement_service import suggest_settlements

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("/suggest", response_model=List[Settlement])
async def suggest(request: SuggestRequest):
    """Suggest payments that settle the given balances."""
    return suggest_settlements(request.balances)


@router.post("/split", response_model=List[PersistedSettlement])
async def split(request: SplitEntitySettlementRequest):
    """Split an entity settlement into participant settlements for storage."""
    entity_ids = {e.entity_id for e in request.entities}
    for party in (request.settlement.from_party, request.settlement.to_party):
        if party.party_id not in entity_ids:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Entity {party.party_id} not found"
            )
    
    return split_entity_settlement(request.settlement, request.entities)
