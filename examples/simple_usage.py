#!/usr/bin/env python3
"""
Simple example of using the InJoy SDK without a config file.
"""
import os

from injoy_sdk import LocalAccount, RestClient, register_coin
from injoy_sdk.register import fund_account


def main():
    """
    Demonstrate the registration flow step by step.

    This example shows how to:
    1. Create an account from a private key
    2. Fund it through the faucet
    3. Register it for its own InJoyCoin
    """
    REST_URL = os.environ.get("REST_URL", "https://fullnode.devnet.aptoslabs.com")
    FAUCET_URL = os.environ.get("FAUCET_URL", "https://faucet.devnet.aptoslabs.com")
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")

    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    owner = LocalAccount.from_private_key_hex(PRIVATE_KEY)
    print(f"Owner address: {owner.address()}")

    with RestClient(REST_URL) as client:
        try:
            balance = fund_account(client, FAUCET_URL, owner.address())
            print(f"Funded, balance: {balance}")

            owner = LocalAccount(
                owner.address(),
                PRIVATE_KEY,
                client.account_sequence_number(owner.address())
            )
            result = register_coin(owner, client)

            print(f"Registered for {result.coin_type}")
            print(f"Transaction hash: {result.record.hash}")
            print(f"Status: {result.record.status.value}")
        except Exception as e:
            print(f"Error registering coin: {str(e)}")


if __name__ == "__main__":
    main()
