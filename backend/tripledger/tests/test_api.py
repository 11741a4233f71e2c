"""
Tests for the balance and settlement endpoints.
"""
from decimal import Decimal
from fastapi.testclient import TestClient
from tripledger.main import app

client = TestClient(app)

PARTICIPANTS = [
    {"participant_id": "a", "participant_name": "Alice"},
    {"participant_id": "b", "participant_name": "Bob"},
    {"participant_id": "c", "participant_name": "Carol", "participant_type": "guest"},
]

DINNER = {
    "id": "e1",
    "amount": "90",
    "paid_by_participant_id": "a",
    "splits": [
        {"participant_id": "a", "amount": "30"},
        {"participant_id": "b", "amount": "30"},
        {"participant_id": "c", "amount": "30"},
    ],
}


def test_health():
    """Test health endpoints."""
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200


def test_calculate_balance():
    """Test the trip balance endpoint."""
    response = client.post(
        "/api/balance/calculate",
        json={"base_currency": "eur", "participants": PARTICIPANTS, "expenses": [DINNER]}
    )
    assert response.status_code == 200
    data = response.json()
    
    assert data["base_currency"] == "EUR"
    assert Decimal(data["total_expenses"]) == Decimal("90")
    assert {p["participant_id"]: Decimal(p["net_balance"]) for p in data["participants"]} == {
        "a": Decimal("60"),
        "b": Decimal("-30"),
        "c": Decimal("-30"),
    }
    suggestions = data["suggested_settlements"]
    assert [(s["from"]["party_id"], s["to"]["party_id"]) for s in suggestions] == [("b", "a"), ("c", "a")]
    assert all(Decimal(s["amount"]) == Decimal("30") for s in suggestions)


def test_calculate_balance_with_history_and_groups():
    """Test the entity view through the endpoint."""
    response = client.post(
        "/api/balance/calculate",
        json={
            "participants": PARTICIPANTS,
            "expenses": [DINNER],
            "settled_settlements": [{"from_participant_id": "b", "to_participant_id": "a", "amount": "30"}],
            "groups": [{"group_id": "g1", "group_name": "Alice & Carol", "member_participant_ids": ["a", "c"]}],
        }
    )
    assert response.status_code == 200
    data = response.json()
    
    assert data["has_groups"] is True
    assert {e["entity_id"]: Decimal(e["net_balance"]) for e in data["entities"]} == {
        "g1": Decimal("0"),
        "b": Decimal("0"),
    }
    assert data["entity_settlements"] == []
    assert len(data["suggested_settlements"]) == 1


def test_calculate_balance_rejects_overlapping_groups():
    """Test that a participant in two groups is a bad request."""
    response = client.post(
        "/api/balance/calculate",
        json={
            "participants": PARTICIPANTS,
            "expenses": [DINNER],
            "groups": [
                {"group_id": "g1", "group_name": "One", "member_participant_ids": ["a", "b"]},
                {"group_id": "g2", "group_name": "Two", "member_participant_ids": ["b", "c"]},
            ],
        }
    )
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Invalid participant groups"


def test_calculate_balance_rejects_non_finite_amounts():
    """Test that NaN and Infinity are rejected at the boundary."""
    bad_amount = dict(DINNER, amount="NaN")
    response = client.post("/api/balance/calculate", json={"participants": PARTICIPANTS, "expenses": [bad_amount]})
    assert response.status_code == 422
    
    bad_rate = dict(DINNER, exchange_rate="Infinity")
    response = client.post("/api/balance/calculate", json={"participants": PARTICIPANTS, "expenses": [bad_rate]})
    assert response.status_code == 422


def test_suggest():
    """Test the suggestion endpoint on raw balances."""
    balances = [
        {"participant_id": "a", "participant_name": "A", "net_balance": "40"},
        {"participant_id": "b", "participant_name": "B", "net_balance": "10"},
        {"participant_id": "c", "participant_name": "C", "net_balance": "-20"},
        {"participant_id": "d", "participant_name": "D", "net_balance": "-30"},
    ]
    response = client.post("/api/settlements/suggest", json={"balances": balances})
    assert response.status_code == 200
    assert [(s["from"]["party_id"], s["to"]["party_id"], Decimal(s["amount"])) for s in response.json()] == [
        ("d", "a", Decimal("30")),
        ("c", "a", Decimal("10")),
        ("c", "b", Decimal("10")),
    ]


def test_split():
    """Test splitting an entity settlement into participant records."""
    entities = [
        {
            "entity_id": "g1",
            "entity_type": "group",
            "display_name": "Family",
            "members": [
                {"participant_id": "x", "participant_name": "X", "net_balance": "20"},
                {"participant_id": "y", "participant_name": "Y", "net_balance": "-5"},
            ],
            "net_balance": "15",
        },
        {
            "entity_id": "z",
            "entity_type": "individual",
            "display_name": "Z",
            "members": [{"participant_id": "z", "participant_name": "Z", "net_balance": "-15"}],
            "net_balance": "-15",
        },
    ]
    settlement = {
        "from": {"party_id": "z", "display_name": "Z"},
        "to": {"party_id": "g1", "display_name": "Family"},
        "amount": "15.00",
    }
    response = client.post("/api/settlements/split", json={"settlement": settlement, "entities": entities})
    assert response.status_code == 200
    assert [(r["to_participant_id"], Decimal(r["amount"])) for r in response.json()] == [
        ("x", Decimal("7.50")),
        ("y", Decimal("7.50")),
    ]
    
    response = client.post("/api/settlements/split", json={"settlement": settlement, "entities": entities[:1]})
    assert response.status_code == 404
    
    sub_cent = dict(settlement, amount="10.005")
    response = client.post("/api/settlements/split", json={"settlement": sub_cent, "entities": entities})
    assert response.status_code == 422
