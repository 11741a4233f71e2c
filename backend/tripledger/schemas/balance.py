"""
Pydantic schemas for balance calculation input and output.

Records arrive from the expense, membership and grouping stores as loose
rows; they are validated here once and the engine trusts them afterwards.
"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional
from decimal import Decimal
from enum import Enum


# Non-finite values are rejected at the boundary
Money = Annotated[Decimal, Field(allow_inf_nan=False)]
PositiveMoney = Annotated[Decimal, Field(gt=0, allow_inf_nan=False)]
CentAmount = Annotated[Decimal, Field(gt=0, decimal_places=2, allow_inf_nan=False)]


class ParticipantType(str, Enum):
    """Trip participant type."""
    MEMBER = "member"
    GUEST = "guest"


class EntityType(str, Enum):
    """Settlement unit type."""
    INDIVIDUAL = "individual"
    GROUP = "group"


class ParticipantData(BaseModel):
    """Schema for a trip participant (registered member or guest)."""
    participant_id: str
    participant_name: str
    participant_avatar: Optional[str] = None
    participant_type: ParticipantType = ParticipantType.MEMBER


class ExpenseSplitData(BaseModel):
    """Share of one expense, in the expense's own currency."""
    participant_id: str
    amount: Money
    percentage: Optional[Money] = None  # Informational only


class ExpenseData(BaseModel):
    """Schema for an expense with its splits."""
    id: str
    amount: PositiveMoney
    currency: Optional[str] = None
    exchange_rate: Optional[Money] = None  # 1 unit of currency = exchange_rate base currency
    paid_by_participant_id: str
    splits: List[ExpenseSplitData] = []


class ParticipantBalance(BaseModel):
    """Schema for a participant's balance (in base currency)."""
    participant_id: str
    participant_name: str
    participant_avatar: Optional[str] = None
    participant_type: ParticipantType = ParticipantType.MEMBER
    total_paid: Money = Decimal(0)
    total_owed: Money = Decimal(0)
    net_balance: Money = Decimal(0)  # paid - owed (positive = is owed, negative = owes)
    is_known: bool = True  # False when the id is missing from the participant list
    
    @property
    def balance_id(self) -> str:
        return self.participant_id
    
    @property
    def display_name(self) -> str:
        return self.participant_name
    
    @property
    def display_avatar(self) -> Optional[str]:
        return self.participant_avatar


class BalanceCalculationResult(BaseModel):
    """Schema for the result of a balance calculation."""
    participants: List[ParticipantBalance]
    total_expenses: Money  # Sum of all expenses in base currency
    participant_count: int


class GroupData(BaseModel):
    """Schema for a group of participants settling as one wallet."""
    group_id: str
    group_name: str
    group_avatar: Optional[str] = None
    member_participant_ids: List[str] = Field(min_length=1)


class EntityBalance(BaseModel):
    """Schema for an entity balance (a single participant or a group)."""
    entity_id: str  # participant_id OR group_id
    entity_type: EntityType
    display_name: str
    display_avatar: Optional[str] = None
    members: List[ParticipantBalance] = []  # Pre-aggregation balances for drill-down
    total_paid: Money = Decimal(0)
    total_owed: Money = Decimal(0)
    net_balance: Money = Decimal(0)
    
    @property
    def balance_id(self) -> str:
        return self.entity_id
