"""
Pydantic schemas for settlements (persisted history and suggestions).
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from tripledger.schemas.balance import (
    CentAmount,
    EntityBalance,
    ExpenseData,
    GroupData,
    Money,
    ParticipantBalance,
    ParticipantData,
    PositiveMoney,
)


class PersistedSettlement(BaseModel):
    """Schema for a payment already recorded as completed (base currency)."""
    from_participant_id: str
    to_participant_id: str
    amount: PositiveMoney


class SettlementParty(BaseModel):
    """One side of a suggested settlement (participant or entity)."""
    party_id: str
    display_name: str
    display_avatar: Optional[str] = None


class Settlement(BaseModel):
    """Schema for a suggested, not yet executed, payment."""
    model_config = ConfigDict(populate_by_name=True)
    
    from_party: SettlementParty = Field(alias="from")
    to_party: SettlementParty = Field(alias="to")
    amount: CentAmount  # Base currency, two decimal places


class SettlementsForParticipant(BaseModel):
    """Schema for the settlements touching one participant or entity."""
    outgoing: List[Settlement] = []
    incoming: List[Settlement] = []


class TripExpenseSummary(BaseModel):
    """Schema for the full balance view of a trip."""
    base_currency: str
    total_expenses: Money  # Total expenses in base currency
    expense_count: int
    has_groups: bool
    # Individual mode
    participants: List[ParticipantBalance]
    suggested_settlements: List[Settlement]
    # Entity mode (has_groups = True)
    entities: Optional[List[EntityBalance]] = None
    entity_settlements: Optional[List[Settlement]] = None
    # Always present
    settled_settlements: List[PersistedSettlement] = []


class TripBalanceRequest(BaseModel):
    """Schema for a balance calculation request."""
    base_currency: Optional[str] = None  # Defaults to settings.BASE_CURRENCY
    participants: List[ParticipantData]
    expenses: List[ExpenseData] = []
    settled_settlements: List[PersistedSettlement] = []
    groups: List[GroupData] = []


class SuggestRequest(BaseModel):
    """Schema for a settlement suggestion request."""
    balances: List[ParticipantBalance]


class SplitEntitySettlementRequest(BaseModel):
    """Schema for splitting an entity settlement into participant records."""
    settlement: Settlement
    entities: List[EntityBalance]
