"""
Coin balance queries.
"""
import logging
from typing import Optional

from .account_address import AccountAddress
from .client import RestClient
from .exceptions import ProtocolError

APTOS_COIN = "0x1::aptos_coin::AptosCoin"


class CoinClient:
    """Reads coin balances through the framework's ``coin::balance`` view function"""

    def __init__(self, client: RestClient, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    def get_account_balance(self, address: AccountAddress, coin_type: str = APTOS_COIN) -> int:
        """
        Get an account's balance of ``coin_type``.

        Args:
            address: Account to query
            coin_type: Coin type tag string

        Returns:
            Balance in the coin's smallest unit

        Raises:
            NetworkError: If the node is unreachable
            ProtocolError: If the node returns something other than a single integer
        """
        result = self.client.view("0x1::coin::balance", [coin_type], [address.to_hex_literal()])
        if len(result) != 1:
            raise ProtocolError(f"coin::balance returned {len(result)} values, expected 1")
        try:
            balance = int(result[0])
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"coin::balance returned non-integer {result[0]!r}") from e
        self.logger.debug(f"Balance of {address} in {coin_type}: {balance}")
        return balance
