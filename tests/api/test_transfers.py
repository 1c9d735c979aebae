"""
Tests for the transfer endpoint.
"""

from simple_bank.api.transfers import get_transfer_service
from simple_bank.main import app
from simple_bank.services.transfer_service import TransferService


def test_create_transfer(client, create_account, fetch_account):
    acct_a = create_account(balance=100)
    acct_b = create_account(balance=50)

    response = client.post("/transfers", json={
        "from_account_id": acct_a.id,
        "to_account_id": acct_b.id,
        "amount": 10,
    })

    assert response.status_code == 201
    data = response.json()
    assert data["transfer"]["amount"] == 10
    assert data["from_account"]["balance"] == 90
    assert data["to_account"]["balance"] == 60
    assert data["from_entry"]["amount"] == -10
    assert data["to_entry"]["amount"] == 10
    assert fetch_account(acct_a.id).balance == 90


def test_non_positive_amount_rejected_by_schema(client, create_account):
    acct_a = create_account()
    acct_b = create_account()

    response = client.post("/transfers", json={
        "from_account_id": acct_a.id,
        "to_account_id": acct_b.id,
        "amount": 0,
    })

    assert response.status_code == 422


def test_same_account_returns_400(client, create_account):
    acct = create_account()

    response = client.post("/transfers", json={
        "from_account_id": acct.id,
        "to_account_id": acct.id,
        "amount": 10,
    })

    assert response.status_code == 400
    assert "same account" in response.json()["detail"]


def test_missing_account_returns_404(client, create_account):
    acct = create_account(balance=100)

    response = client.post("/transfers", json={
        "from_account_id": acct.id,
        "to_account_id": acct.id + 500,
        "amount": 10,
    })

    assert response.status_code == 404


def test_missing_account_returns_404_with_foreign_keys(
    client, fk_store, create_account
):
    acct = create_account(balance=100)
    app.dependency_overrides[get_transfer_service] = (
        lambda: TransferService(fk_store)
    )

    response = client.post("/transfers", json={
        "from_account_id": acct.id,
        "to_account_id": acct.id + 500,
        "amount": 10,
    })

    assert response.status_code == 404


def test_insufficient_funds_returns_400(client, create_account, fetch_account):
    acct_a = create_account(balance=5)
    acct_b = create_account(balance=0)

    response = client.post("/transfers", json={
        "from_account_id": acct_a.id,
        "to_account_id": acct_b.id,
        "amount": 10,
    })

    assert response.status_code == 400
    assert "balance not enough" in response.json()["detail"]
    assert fetch_account(acct_a.id).balance == 5
    assert fetch_account(acct_b.id).balance == 0
