"""
Settlement service for debt simplification.

Greedy matching:
1. Drop balances within epsilon of zero (settled)
2. Split the rest into creditors (positive) and debtors (negative)
3. Sort both by magnitude, largest first
4. Match the largest debtor with the largest creditor for the smaller amount
5. Advance whichever side is settled and repeat

This is a heuristic, not an exact minimum-transaction solver. The
largest-vs-largest order is kept as is because suggestion order and count
are observable to callers.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Set, Union
from tripledger.schemas.balance import EntityBalance, ParticipantBalance
from tripledger.schemas.settlement import (
    Settlement,
    SettlementParty,
    SettlementsForParticipant,
)
from tripledger.services.money_service import floor_money, get_epsilon

logger = logging.getLogger(__name__)

BalanceLike = Union[ParticipantBalance, EntityBalance]


def _party(balance: BalanceLike) -> SettlementParty:
    return SettlementParty(
        party_id=balance.balance_id,
        display_name=balance.display_name,
        display_avatar=balance.display_avatar,
    )


def suggest_settlements(
    balances: Sequence[BalanceLike],
    epsilon: Optional[Decimal] = None
) -> List[Settlement]:
    """
    Suggest the payments that bring every balance to zero.
    
    Works on participant or entity balances alike. Ties between equal
    magnitudes keep input order, so the output is deterministic and is
    returned in generation order (largest debtor to largest creditor first).
    Produces at most len(debtors) + len(creditors) - 1 settlements.
    """
    if epsilon is None:
        epsilon = get_epsilon()
    
    # Working copies as [balance, remaining magnitude]; inputs are not mutated
    creditors = [[b, b.net_balance] for b in balances if b.net_balance > epsilon]
    debtors = [[b, -b.net_balance] for b in balances if b.net_balance < -epsilon]
    
    # Sort in descending order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)
    
    settlements = []
    cred_idx = 0
    debt_idx = 0
    
    while cred_idx < len(creditors) and debt_idx < len(debtors):
        creditor, cred_amount = creditors[cred_idx]
        debtor, debt_amount = debtors[debt_idx]
        
        # Cut to cents so a payment never exceeds either remaining side
        amount = floor_money(min(cred_amount, debt_amount))
        if amount <= 0:
            # Nothing payable left between this pair; drop the smaller side
            if cred_amount <= debt_amount:
                cred_idx += 1
            else:
                debt_idx += 1
            continue
        
        settlements.append(Settlement(
            from_party=_party(debtor),
            to_party=_party(creditor),
            amount=amount,
        ))
        
        creditors[cred_idx][1] = cred_amount - amount
        debtors[debt_idx][1] = debt_amount - amount
        
        if creditors[cred_idx][1] <= epsilon:
            cred_idx += 1
        if debtors[debt_idx][1] <= epsilon:
            debt_idx += 1
    
    unmatched = sum((c[1] for c in creditors[cred_idx:]), Decimal(0)) + \
        sum((d[1] for d in debtors[debt_idx:]), Decimal(0))
    if unmatched > epsilon:
        logger.warning(f"Balances do not add up to zero; {unmatched} left without a counterpart")
    
    logger.debug(
        f"Suggested {len(settlements)} settlements for "
        f"{len(debtors)} debtors and {len(creditors)} creditors"
    )
    return settlements


def get_settlement_participant_count(settlements: List[Settlement]) -> int:
    """Get the number of distinct parties involved in settlements."""
    parties: Set[str] = set()
    for settlement in settlements:
        parties.add(settlement.from_party.party_id)
        parties.add(settlement.to_party.party_id)
    return len(parties)


def get_settlements_for_participant(
    settlements: List[Settlement],
    party_id: str
) -> SettlementsForParticipant:
    """Get outgoing and incoming settlements for a participant or entity."""
    return SettlementsForParticipant(
        outgoing=[s for s in settlements if s.from_party.party_id == party_id],
        incoming=[s for s in settlements if s.to_party.party_id == party_id],
    )


def get_total_outgoing(settlements: List[Settlement], party_id: str) -> Decimal:
    """Calculate the total amount a party needs to pay out."""
    return sum((s.amount for s in settlements if s.from_party.party_id == party_id), Decimal(0))


def get_total_incoming(settlements: List[Settlement], party_id: str) -> Decimal:
    """Calculate the total amount a party should receive."""
    return sum((s.amount for s in settlements if s.to_party.party_id == party_id), Decimal(0))
