"""
Balance service for per-participant paid/owed/net calculation.

Net balance = total_paid - total_owed, in the trip's base currency:
- Positive: participant is owed money (paid more than their share)
- Negative: participant owes money (paid less than their share)
- Within epsilon of zero: participant is settled
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional
from tripledger.schemas.balance import (
    BalanceCalculationResult,
    ExpenseData,
    ParticipantBalance,
    ParticipantData,
    ParticipantType,
)
from tripledger.schemas.settlement import PersistedSettlement
from tripledger.services.money_service import get_epsilon, is_settled, to_base_currency

logger = logging.getLogger(__name__)


def _unknown_balance(participant_id: str) -> ParticipantBalance:
    """Placeholder for an id referenced by a record but missing from the participant list."""
    logger.warning(f"Participant {participant_id} is not in the participant list; keeping its balance")
    return ParticipantBalance(
        participant_id=participant_id,
        participant_name=participant_id,
        participant_type=ParticipantType.GUEST,
        is_known=False,
    )


def _sort_by_net_balance(balances: List[ParticipantBalance]) -> List[ParticipantBalance]:
    # Stable: ties keep their input order
    return sorted(balances, key=lambda b: b.net_balance, reverse=True)


def calculate_balances(
    expenses: List[ExpenseData],
    participants: List[ParticipantData]
) -> BalanceCalculationResult:
    """
    Calculate balances for all participants in a trip.
    
    Every participant is present in the output, including those who appear
    in no expense. Payer and split ids that are not in the participant list
    still accumulate and are surfaced with is_known=False.
    Split amounts are converted with the parent expense's exchange rate; they
    are summed as given, never re-derived from the expense amount.
    """
    total_paid: Dict[str, Decimal] = {}
    total_owed: Dict[str, Decimal] = {}
    known: Dict[str, ParticipantData] = {}
    
    for participant in participants:
        known[participant.participant_id] = participant
        total_paid[participant.participant_id] = Decimal(0)
        total_owed[participant.participant_id] = Decimal(0)
    
    total_expenses = Decimal(0)
    
    for expense in expenses:
        converted_amount = to_base_currency(expense.amount, expense.exchange_rate)
        total_expenses += converted_amount
        
        # Add what payer paid
        payer_id = expense.paid_by_participant_id
        if payer_id not in total_paid:
            total_paid[payer_id] = Decimal(0)
            total_owed[payer_id] = Decimal(0)
        total_paid[payer_id] += converted_amount
        
        # Add what each split participant owes
        for split in expense.splits:
            participant_id = split.participant_id
            if participant_id not in total_owed:
                total_paid[participant_id] = Decimal(0)
                total_owed[participant_id] = Decimal(0)
            total_owed[participant_id] += to_base_currency(split.amount, expense.exchange_rate)
    
    balances = []
    for participant_id in total_paid:
        participant = known.get(participant_id)
        if participant:
            balance = ParticipantBalance(**participant.model_dump())
        else:
            balance = _unknown_balance(participant_id)
        balance.total_paid = total_paid[participant_id]
        balance.total_owed = total_owed[participant_id]
        balance.net_balance = total_paid[participant_id] - total_owed[participant_id]
        balances.append(balance)
    
    logger.debug(
        f"Calculated balances for {len(balances)} participants over "
        f"{len(expenses)} expenses (total {total_expenses})"
    )
    
    return BalanceCalculationResult(
        participants=_sort_by_net_balance(balances),
        total_expenses=total_expenses,
        participant_count=len(participants),
    )


def apply_persisted_settlements(
    balances: List[ParticipantBalance],
    settlements: List[PersistedSettlement]
) -> List[ParticipantBalance]:
    """
    Adjust balances for payments that have already been made.
    
    If A paid B 50, A's balance increases by 50 (counted as paid) and B's
    balance decreases by 50 (counted as owed). Several settlements between
    the same pair add up. Input balances are not mutated.
    """
    balance_map: Dict[str, ParticipantBalance] = {
        b.participant_id: b.model_copy() for b in balances
    }
    
    for settlement in settlements:
        for participant_id in (settlement.from_participant_id, settlement.to_participant_id):
            if participant_id not in balance_map:
                balance_map[participant_id] = _unknown_balance(participant_id)
        
        from_balance = balance_map[settlement.from_participant_id]
        from_balance.total_paid += settlement.amount
        from_balance.net_balance += settlement.amount
        
        to_balance = balance_map[settlement.to_participant_id]
        to_balance.total_owed += settlement.amount
        to_balance.net_balance -= settlement.amount
    
    return _sort_by_net_balance(list(balance_map.values()))


def calculate_balances_with_settlements(
    expenses: List[ExpenseData],
    participants: List[ParticipantData],
    settled_settlements: List[PersistedSettlement]
) -> BalanceCalculationResult:
    """Calculate balances, then account for settlements already made."""
    result = calculate_balances(expenses, participants)
    return result.model_copy(update={
        "participants": apply_persisted_settlements(result.participants, settled_settlements)
    })


def get_creditors(balances: List[ParticipantBalance], epsilon: Optional[Decimal] = None) -> List[ParticipantBalance]:
    """Get participants who are owed money."""
    epsilon = get_epsilon() if epsilon is None else epsilon
    return [b for b in balances if b.net_balance > epsilon]


def get_debtors(balances: List[ParticipantBalance], epsilon: Optional[Decimal] = None) -> List[ParticipantBalance]:
    """Get participants who owe money."""
    epsilon = get_epsilon() if epsilon is None else epsilon
    return [b for b in balances if b.net_balance < -epsilon]


def get_settled(balances: List[ParticipantBalance], epsilon: Optional[Decimal] = None) -> List[ParticipantBalance]:
    """Get participants whose balance is within epsilon of zero."""
    return [b for b in balances if is_settled(b.net_balance, epsilon)]


def validate_balances(balances: List[ParticipantBalance], epsilon: Optional[Decimal] = None) -> bool:
    """
    Accounting check: total debts equal total credits.
    The sum of all net balances must be within epsilon of zero.
    """
    epsilon = get_epsilon() if epsilon is None else epsilon
    total_net = sum((b.net_balance for b in balances), Decimal(0))
    return abs(total_net) < epsilon
