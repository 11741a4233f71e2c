"""
Trip summary: runs the whole balance pipeline for one trip.

expenses -> balances -> settled history applied -> (groups) entities -> suggestions
"""
import logging
from typing import List, Optional
from tripledger.core.config import settings
from tripledger.schemas.balance import ExpenseData, GroupData, ParticipantData
from tripledger.schemas.settlement import PersistedSettlement, TripExpenseSummary
from tripledger.services.balance_service import calculate_balances_with_settlements
from tripledger.services.entity_service import aggregate_to_entities
from tripledger.services.settlement_service import suggest_settlements

logger = logging.getLogger(__name__)


def build_trip_summary(
    expenses: List[ExpenseData],
    participants: List[ParticipantData],
    settled_settlements: Optional[List[PersistedSettlement]] = None,
    groups: Optional[List[GroupData]] = None,
    base_currency: Optional[str] = None
) -> TripExpenseSummary:
    """
    Build the balance view of a trip.
    
    Participant-level suggestions are always computed. When groups are given,
    entity balances and entity-level suggestions are computed as well.
    """
    settled_settlements = settled_settlements or []
    groups = groups or []
    base_currency = (base_currency or settings.BASE_CURRENCY).upper()
    
    result = calculate_balances_with_settlements(expenses, participants, settled_settlements)
    
    entities = None
    entity_settlements = None
    if groups:
        entities = aggregate_to_entities(result.participants, groups)
        entity_settlements = suggest_settlements(entities)
    
    suggested = suggest_settlements(result.participants)
    
    logger.info(
        f"Trip summary: {len(expenses)} expenses, {result.total_expenses} {base_currency}, "
        f"{len(suggested)} suggested settlements"
    )
    
    return TripExpenseSummary(
        base_currency=base_currency,
        total_expenses=result.total_expenses,
        expense_count=len(expenses),
        has_groups=bool(groups),
        participants=result.participants,
        suggested_settlements=suggested,
        entities=entities,
        entity_settlements=entity_settlements,
        settled_settlements=settled_settlements,
    )
