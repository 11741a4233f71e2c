"""
Tests for the trip summary pipeline.
"""
from decimal import Decimal
from tripledger.schemas.balance import GroupData
from tripledger.schemas.settlement import PersistedSettlement
from tripledger.services.summary_service import build_trip_summary
from conftest import make_expense


def test_summary_without_groups(participants, dinner):
    """Test the individual-mode summary."""
    summary = build_trip_summary([dinner], participants, base_currency="usd")
    
    assert summary.base_currency == "USD"
    assert summary.total_expenses == Decimal("90")
    assert summary.expense_count == 1
    assert summary.has_groups is False
    assert summary.entities is None
    assert summary.entity_settlements is None
    assert len(summary.suggested_settlements) == 2


def test_summary_defaults_to_configured_currency(participants, dinner):
    """Test that the base currency falls back to settings."""
    summary = build_trip_summary([dinner], participants)
    assert summary.base_currency == "BRL"


def test_summary_applies_history(participants, dinner):
    """Test that settled history reduces the suggestions."""
    paid = [PersistedSettlement(from_participant_id="b", to_participant_id="a", amount=Decimal("30"))]
    summary = build_trip_summary([dinner], participants, settled_settlements=paid)
    
    assert [(s.from_party.party_id, s.amount) for s in summary.suggested_settlements] == [("c", Decimal("30"))]
    assert summary.settled_settlements == paid


def test_summary_with_groups(participants):
    """Test the entity-mode summary."""
    expenses = [make_expense("e1", 90, "a", [("a", 30), ("b", 30), ("c", 30)])]
    groups = [GroupData(group_id="couple", group_name="Alice & Bob", member_participant_ids=["a", "b"])]
    summary = build_trip_summary(expenses, participants, groups=groups)
    
    assert summary.has_groups is True
    assert {e.entity_id: e.net_balance for e in summary.entities} == {
        "couple": Decimal("30"),
        "c": Decimal("-30"),
    }
    assert [(s.from_party.party_id, s.to_party.party_id, s.amount) for s in summary.entity_settlements] == [
        ("c", "couple", Decimal("30")),
    ]
    # Participant-level view is still available
    assert len(summary.suggested_settlements) == 2
