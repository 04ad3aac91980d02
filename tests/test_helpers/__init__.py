from .client_creator import (
    TEST_ADDRESS,
    TEST_API_URL,
    TEST_CHAIN_ID,
    TEST_FAUCET_URL,
    TEST_GAS_PRICE,
    TEST_MAX_GAS,
    TEST_NOW,
    TEST_PRIV_KEY,
    TEST_REST_URL,
    TEST_TX_HASH,
    FakeClock,
    committed_json,
    create_test_account,
    create_test_client,
    pending_json,
)
