"""
Tests for the faucet and coin balance clients.
"""
import pytest
import requests

from injoy_sdk.account_address import AccountAddress
from injoy_sdk.coin_client import CoinClient
from injoy_sdk.exceptions import FundingError, NetworkError, ProtocolError
from injoy_sdk.faucet import FaucetClient
from tests.test_helpers import TEST_API_URL, TEST_FAUCET_URL, committed_json

OWNER = AccountAddress.from_str("0xA1")
FAUCET_TX = "0x" + "fa" * 32


def test_fund_waits_for_faucet_transactions(client, requests_mock):
    requests_mock.post(f"{TEST_FAUCET_URL}/mint", json=[FAUCET_TX])
    requests_mock.get(f"{TEST_API_URL}/transactions/by_hash/{FAUCET_TX}", json=committed_json(tx_hash=FAUCET_TX))

    records = FaucetClient(TEST_FAUCET_URL, client).fund(OWNER, 100_000_000)

    assert [r.hash for r in records] == [FAUCET_TX]
    mint = requests_mock.request_history[0]
    assert mint.qs == {"amount": ["100000000"], "address": [OWNER.to_hex_literal()]}


def test_fund_rejected(client, requests_mock):
    requests_mock.post(f"{TEST_FAUCET_URL}/mint", status_code=400, text="amount too large")
    with pytest.raises(FundingError, match="amount too large"):
        FaucetClient(TEST_FAUCET_URL, client).fund(OWNER, 10**18)


def test_fund_unreachable(client, requests_mock):
    requests_mock.post(f"{TEST_FAUCET_URL}/mint", exc=requests.ConnectionError("no route"))
    with pytest.raises(NetworkError, match="fund failed"):
        FaucetClient(TEST_FAUCET_URL, client).fund(OWNER, 1)


def test_fund_unexpected_body(client, requests_mock):
    requests_mock.post(f"{TEST_FAUCET_URL}/mint", json={"hash": FAUCET_TX})
    with pytest.raises(FundingError, match="unexpected body"):
        FaucetClient(TEST_FAUCET_URL, client).fund(OWNER, 1)


def test_fund_transaction_aborted(client, requests_mock):
    requests_mock.post(f"{TEST_FAUCET_URL}/mint", json=[FAUCET_TX])
    requests_mock.get(
        f"{TEST_API_URL}/transactions/by_hash/{FAUCET_TX}",
        json=committed_json(tx_hash=FAUCET_TX, success=False, vm_status="Out of gas"),
    )
    with pytest.raises(FundingError, match="Out of gas"):
        FaucetClient(TEST_FAUCET_URL, client).fund(OWNER, 1)


def test_fund_requires_positive_amount(client):
    with pytest.raises(ValueError):
        FaucetClient(TEST_FAUCET_URL, client).fund(OWNER, 0)


def test_get_account_balance(client, requests_mock):
    requests_mock.post(f"{TEST_API_URL}/view", json=["100000000"])
    assert CoinClient(client).get_account_balance(OWNER) == 100_000_000
    assert requests_mock.last_request.json()["arguments"] == [OWNER.to_hex_literal()]


def test_get_account_balance_malformed(client, requests_mock):
    requests_mock.post(f"{TEST_API_URL}/view", json=["lots"])
    with pytest.raises(ProtocolError):
        CoinClient(client).get_account_balance(OWNER)
