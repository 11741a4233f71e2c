"""
Entity service: collapses participants into settlement units.

A group (e.g. a couple sharing one wallet) settles as a single entity whose
paid/owed/net figures are the sums over its members. Participants outside
every group become individual entities wrapping themselves.
"""
import logging
from decimal import Decimal, ROUND_DOWN
from typing import Dict, List, Set
from tripledger.schemas.balance import (
    EntityBalance,
    EntityType,
    GroupData,
    ParticipantBalance,
)
from tripledger.schemas.settlement import PersistedSettlement, Settlement
from tripledger.services.money_service import CENT

logger = logging.getLogger(__name__)


def aggregate_to_entities(
    balances: List[ParticipantBalance],
    groups: List[GroupData]
) -> List[EntityBalance]:
    """
    Aggregate participant balances into entity balances.
    
    Groups without a single known member produce no entity.
    Overlapping groups are not detected here: a participant listed in two
    groups is counted in both. Callers validate groupings first
    (see validate_groupings).
    """
    balance_map: Dict[str, ParticipantBalance] = {b.participant_id: b for b in balances}
    grouped_ids: Set[str] = set()
    entities: List[EntityBalance] = []
    
    for group in groups:
        members = []
        for participant_id in group.member_participant_ids:
            balance = balance_map.get(participant_id)
            if balance is None:
                logger.warning(f"Group {group.group_id} references unknown participant {participant_id}")
                continue
            members.append(balance)
            grouped_ids.add(participant_id)
        
        if not members:
            logger.warning(f"Group {group.group_id} has no known members; skipping it")
            continue
        
        entities.append(EntityBalance(
            entity_id=group.group_id,
            entity_type=EntityType.GROUP,
            display_name=group.group_name,
            display_avatar=group.group_avatar,
            members=members,
            total_paid=sum((m.total_paid for m in members), Decimal(0)),
            total_owed=sum((m.total_owed for m in members), Decimal(0)),
            net_balance=sum((m.net_balance for m in members), Decimal(0)),
        ))
    
    for balance in balances:
        if balance.participant_id in grouped_ids:
            continue
        entities.append(EntityBalance(
            entity_id=balance.participant_id,
            entity_type=EntityType.INDIVIDUAL,
            display_name=balance.participant_name,
            display_avatar=balance.participant_avatar,
            members=[balance],
            total_paid=balance.total_paid,
            total_owed=balance.total_owed,
            net_balance=balance.net_balance,
        ))
    
    return sorted(entities, key=lambda e: e.net_balance, reverse=True)


def validate_groupings(groups: List[GroupData], participant_ids: List[str]) -> List[str]:
    """
    Check that every grouped participant exists and belongs to one group only.
    
    Returns:
        List of problems found (empty when the groupings are valid)
    """
    problems = []
    known = set(participant_ids)
    owner: Dict[str, str] = {}
    seen_groups: Set[str] = set()
    
    for group in groups:
        if group.group_id in seen_groups:
            problems.append(f"Group {group.group_id} is defined more than once")
        seen_groups.add(group.group_id)
        if group.group_id in known:
            problems.append(f"Group id {group.group_id} collides with a participant id")
        
        for participant_id in group.member_participant_ids:
            if participant_id not in known:
                problems.append(f"Group {group.group_id} references unknown participant {participant_id}")
            elif participant_id in owner and owner[participant_id] != group.group_id:
                problems.append(
                    f"Participant {participant_id} belongs to both "
                    f"{owner[participant_id]} and {group.group_id}"
                )
            else:
                owner[participant_id] = group.group_id
    
    return problems


def _member_ids(party_id: str, entity_map: Dict[str, EntityBalance]) -> List[str]:
    entity = entity_map.get(party_id)
    if entity and entity.entity_type == EntityType.GROUP and entity.members:
        return [m.participant_id for m in entity.members]
    return [party_id]


def split_entity_settlement(
    settlement: Settlement,
    entities: List[EntityBalance]
) -> List[PersistedSettlement]:
    """
    Split an entity-level settlement into participant settlements for storage.
    
    The amount is divided equally over every (from member, to member) pair.
    Shares are cut to cents and the leftover cents go to the first pairs, so
    the records always add up to the settlement amount.
    """
    entity_map = {e.entity_id: e for e in entities}
    from_ids = _member_ids(settlement.from_party.party_id, entity_map)
    to_ids = _member_ids(settlement.to_party.party_id, entity_map)
    
    pairs = [(from_id, to_id) for from_id in from_ids for to_id in to_ids]
    share = (settlement.amount / len(pairs)).quantize(CENT, rounding=ROUND_DOWN)
    leftover_cents = int((settlement.amount - share * len(pairs)) / CENT)
    
    results = []
    for index, (from_id, to_id) in enumerate(pairs):
        amount = share + CENT if index < leftover_cents else share
        if amount <= 0:
            continue
        results.append(PersistedSettlement(
            from_participant_id=from_id,
            to_participant_id=to_id,
            amount=amount,
        ))
    
    return results
