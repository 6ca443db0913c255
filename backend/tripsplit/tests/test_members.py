"""
Tests for trip member endpoints.
"""


def test_add_and_list_members(client, trip):
    response = client.post(f"/api/trips/{trip['id']}/members", json={"name": "  Alice  "})
    assert response.status_code == 201
    alice = response.json()
    assert alice["name"] == "Alice"
    assert alice["userId"] is None
    assert alice["tripId"] == trip["id"]

    response = client.post(
        f"/api/trips/{trip['id']}/members",
        json={"name": "Bob", "userId": "user-42"}
    )
    assert response.status_code == 201

    response = client.get(f"/api/trips/{trip['id']}/members")
    assert response.status_code == 200
    assert [m["name"] for m in response.json()] == ["Alice", "Bob"]
    assert response.json()[1]["userId"] == "user-42"


def test_member_name_validation(client, trip):
    response = client.post(f"/api/trips/{trip['id']}/members", json={"name": "   "})
    assert response.status_code == 422

    response = client.post(f"/api/trips/{trip['id']}/members", json={"name": "x" * 51})
    assert response.status_code == 422


def test_members_of_unknown_trip(client):
    assert client.get("/api/trips/999/members").status_code == 404
    assert client.post("/api/trips/999/members", json={"name": "Alice"}).status_code == 404


def test_delete_member_cascades_expenses_and_splits(client, trip, members):
    alice, bob, carol = members
    trip_id = trip["id"]

    client.post(f"/api/trips/{trip_id}/expenses", json={
        "payerId": bob["id"],
        "amount": 900,
        "splits": [{"memberId": m["id"]} for m in members]
    })
    client.post(f"/api/trips/{trip_id}/expenses", json={
        "payerId": alice["id"],
        "amount": 600,
        "splits": [{"memberId": alice["id"]}, {"memberId": carol["id"]}]
    })

    response = client.delete(f"/api/trips/{trip_id}/members/{bob['id']}")
    assert response.status_code == 204

    expenses = client.get(f"/api/trips/{trip_id}/expenses").json()
    assert len(expenses) == 1
    assert expenses[0]["payerId"] == alice["id"]

    settlement = client.get(f"/api/trips/{trip_id}/settlement").json()
    assert [b["memberId"] for b in settlement["balances"]] == [alice["id"], carol["id"]]
    assert settlement["totalExpenses"] == 600


def test_delete_member_removes_their_splits(client, trip, members):
    alice, bob, carol = members
    trip_id = trip["id"]

    client.post(f"/api/trips/{trip_id}/expenses", json={
        "payerId": alice["id"],
        "amount": 900,
        "splits": [{"memberId": m["id"]} for m in members]
    })
    client.delete(f"/api/trips/{trip_id}/members/{carol['id']}")

    expenses = client.get(f"/api/trips/{trip_id}/expenses").json()
    assert [s["memberId"] for s in expenses[0]["splits"]] == [alice["id"], bob["id"]]

    settlement = client.get(f"/api/trips/{trip_id}/settlement").json()
    assert {b["memberId"]: b["balance"] for b in settlement["balances"]} == {
        alice["id"]: 450,
        bob["id"]: -450,
    }


def test_delete_unknown_member(client, trip):
    assert client.delete(f"/api/trips/{trip['id']}/members/12345").status_code == 404


def test_delete_member_refused_when_an_expense_would_not_divide(client, trip, members):
    alice, bob, _ = members
    trip_id = trip["id"]

    response = client.post(f"/api/trips/{trip_id}/expenses", json={
        "payerId": alice["id"],
        "amount": 1000,
        "splits": [
            {"memberId": alice["id"], "shareType": "amount", "shareValue": 500},
            {"memberId": bob["id"], "shareType": "amount", "shareValue": 500},
        ]
    })
    expense_id = response.json()["id"]
    assert client.get(f"/api/trips/{trip_id}/settlement").status_code == 200

    response = client.delete(f"/api/trips/{trip_id}/members/{bob['id']}")
    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["details"]["code"] == "unallocated_remainder"
    assert detail["details"]["expenseId"] == expense_id

    names = [m["name"] for m in client.get(f"/api/trips/{trip_id}/members").json()]
    assert names == ["Alice", "Bob", "Carol"]
    expense = client.get(f"/api/trips/{trip_id}/expenses").json()[0]
    assert len(expense["splits"]) == 2

    settlement = client.get(f"/api/trips/{trip_id}/settlement")
    assert settlement.status_code == 200
    assert settlement.json()["settlements"] == [
        {"from": bob["id"], "fromName": "Bob", "to": alice["id"], "toName": "Alice", "amount": 500},
    ]


def test_delete_member_allowed_when_equal_shares_absorb_the_rest(client, trip, members):
    alice, bob, carol = members
    trip_id = trip["id"]

    client.post(f"/api/trips/{trip_id}/expenses", json={
        "payerId": alice["id"],
        "amount": 1000,
        "splits": [
            {"memberId": bob["id"], "shareType": "amount", "shareValue": 400},
            {"memberId": carol["id"], "shareType": "equal"},
        ]
    })

    assert client.delete(f"/api/trips/{trip_id}/members/{bob['id']}").status_code == 204

    settlement = client.get(f"/api/trips/{trip_id}/settlement").json()
    assert {b["memberId"]: b["balance"] for b in settlement["balances"]} == {
        alice["id"]: 1000,
        carol["id"]: -1000,
    }
