"""
Pytest fixtures for the InJoy SDK tests.
"""
import time

import pytest

from injoy_sdk._rate_limited_log import reset_rate_limits
from injoy_sdk.transactions import EntryFunction
from injoy_sdk.register import register_payload
from tests.test_helpers import create_test_account, create_test_client


# Make time.sleep instantaneous so confirmation polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def client():
    rest_client = create_test_client()
    yield rest_client
    rest_client.close()


@pytest.fixture
def account():
    return create_test_account()


@pytest.fixture
def register_entry() -> EntryFunction:
    return register_payload("0xA1::injoy_coin::InJoyCoin")
