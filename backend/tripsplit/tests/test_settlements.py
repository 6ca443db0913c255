"""
Tests for the settlement endpoint.
"""


def add_expense(client, trip_id, payer, amount, splits):
    response = client.post(f"/api/trips/{trip_id}/expenses", json={
        "payerId": payer["id"],
        "amount": amount,
        "splits": splits
    })
    assert response.status_code == 201
    return response.json()


def test_settlement_for_equal_split(client, trip, members):
    alice, bob, carol = members
    add_expense(client, trip["id"], alice, 3000, [{"memberId": m["id"]} for m in members])

    response = client.get(f"/api/trips/{trip['id']}/settlement")
    assert response.status_code == 200
    data = response.json()

    assert data["totalExpenses"] == 3000
    assert data["currency"] == "JPY"
    assert [m["name"] for m in data["members"]] == ["Alice", "Bob", "Carol"]
    assert data["balances"] == [
        {"memberId": alice["id"], "memberName": "Alice", "totalPaid": 3000, "totalOwed": 1000, "balance": 2000},
        {"memberId": bob["id"], "memberName": "Bob", "totalPaid": 0, "totalOwed": 1000, "balance": -1000},
        {"memberId": carol["id"], "memberName": "Carol", "totalPaid": 0, "totalOwed": 1000, "balance": -1000},
    ]
    assert data["settlements"] == [
        {"from": bob["id"], "fromName": "Bob", "to": alice["id"], "toName": "Alice", "amount": 1000},
        {"from": carol["id"], "fromName": "Carol", "to": alice["id"], "toName": "Alice", "amount": 1000},
    ]
    assert "Bob -> Alice: 1,000 JPY" in data["summary"]


def test_settlement_with_no_expenses(client, trip, members):
    data = client.get(f"/api/trips/{trip['id']}/settlement").json()
    assert data["balances"] == []
    assert data["settlements"] == []
    assert data["totalExpenses"] == 0
    assert len(data["members"]) == 3


def test_settlement_mixed_and_uneven(client, trip, members):
    alice, bob, carol = members
    add_expense(client, trip["id"], alice, 1000, [
        {"memberId": alice["id"], "shareType": "amount", "shareValue": 200},
        {"memberId": bob["id"], "shareType": "percentage", "shareValue": 50},
        {"memberId": carol["id"], "shareType": "equal"},
    ])
    add_expense(client, trip["id"], carol, 100, [{"memberId": m["id"]} for m in members])
    add_expense(client, trip["id"], bob, 5000, [])

    data = client.get(f"/api/trips/{trip['id']}/settlement").json()
    balances = {b["memberId"]: b["balance"] for b in data["balances"]}

    # Alice: 1000 - 200 - 34, Bob: 0 - 500 - 33, Carol: 100 - 300 - 33
    assert balances == {alice["id"]: 766, bob["id"]: -533, carol["id"]: -233}
    assert sum(balances.values()) == 0
    assert data["totalExpenses"] == 6100
    assert data["settlements"] == [
        {"from": bob["id"], "fromName": "Bob", "to": alice["id"], "toName": "Alice", "amount": 533},
        {"from": carol["id"], "fromName": "Carol", "to": alice["id"], "toName": "Alice", "amount": 233},
    ]


def test_settlement_is_recomputed_after_changes(client, trip, members):
    alice, bob, _ = members
    expense = add_expense(client, trip["id"], alice, 1000, [{"memberId": alice["id"]}, {"memberId": bob["id"]}])
    first = client.get(f"/api/trips/{trip['id']}/settlement").json()
    assert first["settlements"][0]["amount"] == 500

    client.put(f"/api/trips/{trip['id']}/expenses/{expense['id']}", json={"amount": 3000})
    second = client.get(f"/api/trips/{trip['id']}/settlement").json()
    assert second["settlements"][0]["amount"] == 1500


def test_settlement_unknown_trip(client):
    assert client.get("/api/trips/404/settlement").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_inconsistent_balances_return_server_error(client, trip, members, monkeypatch):
    from tripsplit.api.routes import settlements
    from tripsplit.core.exceptions import InternalInconsistency

    def broken_settlement(trip_id, db):
        raise InternalInconsistency("Balances do not sum to zero (net 1)")

    monkeypatch.setattr(settlements, "calculate_settlement", broken_settlement)

    response = client.get(f"/api/trips/{trip['id']}/settlement")
    assert response.status_code == 500
    assert response.json() == {
        "detail": {"error": "Settlement could not be computed consistently"}
    }
