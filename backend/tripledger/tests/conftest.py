"""
Shared fixtures and builders for the balance engine tests.
"""
import pytest
from decimal import Decimal
from tripledger.schemas.balance import (
    ExpenseData,
    ExpenseSplitData,
    ParticipantBalance,
    ParticipantData,
)
from tripledger.schemas.settlement import PersistedSettlement


def make_balance(participant_id, net_balance, name=None):
    """Build a participant balance with only the net figure filled in."""
    net = Decimal(str(net_balance))
    return ParticipantBalance(
        participant_id=participant_id,
        participant_name=name or participant_id.upper(),
        total_paid=max(net, Decimal(0)),
        total_owed=max(-net, Decimal(0)),
        net_balance=net,
    )


def make_expense(expense_id, amount, paid_by, splits, exchange_rate=None):
    """Build an expense; splits is a list of (participant_id, amount) pairs."""
    return ExpenseData(
        id=expense_id,
        amount=Decimal(str(amount)),
        exchange_rate=None if exchange_rate is None else Decimal(str(exchange_rate)),
        paid_by_participant_id=paid_by,
        splits=[
            ExpenseSplitData(participant_id=pid, amount=Decimal(str(share)))
            for pid, share in splits
        ],
    )


def as_persisted(settlements):
    """Treat suggested settlements as if they had been paid."""
    return [
        PersistedSettlement(
            from_participant_id=s.from_party.party_id,
            to_participant_id=s.to_party.party_id,
            amount=s.amount,
        )
        for s in settlements
    ]


def net_by_id(balances):
    return {b.balance_id: b.net_balance for b in balances}


@pytest.fixture
def participants():
    """Three trip participants: Alice, Bob and a guest, Carol."""
    return [
        ParticipantData(participant_id="a", participant_name="Alice", participant_avatar="alice.png"),
        ParticipantData(participant_id="b", participant_name="Bob"),
        ParticipantData(participant_id="c", participant_name="Carol", participant_type="guest"),
    ]


@pytest.fixture
def dinner():
    """Dinner of 90 paid by Alice, split equally three ways."""
    return make_expense("e1", 90, "a", [("a", 30), ("b", 30), ("c", 30)])
