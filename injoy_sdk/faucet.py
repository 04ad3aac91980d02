"""
Faucet client for funding test accounts.
"""
import logging
from typing import List, Optional

import requests

from .account_address import AccountAddress
from .client import RestClient, validate_url
from .exceptions import FundingError, NetworkError
from .models import TransactionRecord


class FaucetClient:
    """
    Credits accounts on test networks.

    The faucet answers with the hashes of the transactions it submitted;
    ``fund`` waits for every one of them through the node.
    """

    def __init__(
        self,
        faucet_url: str,
        rest_client: RestClient,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        validate_url("faucet_url", faucet_url)
        self.faucet_url = faucet_url.rstrip('/')
        self.rest_client = rest_client
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def fund(
        self,
        address: AccountAddress,
        amount: int,
        wait_timeout: Optional[float] = None
    ) -> List[TransactionRecord]:
        """
        Mint ``amount`` to ``address``, creating the account if needed.

        Args:
            address: Account to fund
            amount: Amount in octas
            wait_timeout: Timeout for each faucet transaction to commit

        Returns:
            Committed records of the faucet's transactions

        Raises:
            FundingError: If the faucet rejects the request or a funding transaction aborts
            NetworkError: If the faucet or node cannot be reached
            TransactionTimeoutError: If a funding transaction is not committed in time
        """
        if amount <= 0:
            raise ValueError(f"Funding amount must be positive, got {amount}")

        params = {"amount": amount, "address": address.to_hex_literal()}
        try:
            response = self.rest_client.session.post(
                f"{self.faucet_url}/mint", params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"Faucet request failed: {e}")
            raise NetworkError(f"fund failed: {str(e)}") from e

        if response.status_code >= 500:
            raise NetworkError(
                f"fund failed: HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )
        if response.status_code >= 400:
            raise FundingError(f"Faucet rejected funding request: HTTP {response.status_code}: {response.text[:200]}")

        try:
            tx_hashes = response.json()
        except ValueError as e:
            raise FundingError(f"Faucet returned invalid JSON: {str(e)}") from e
        if not isinstance(tx_hashes, list) or not all(isinstance(h, str) for h in tx_hashes):
            raise FundingError(f"Faucet returned unexpected body: {tx_hashes!r}")

        self.logger.info(f"Faucet submitted {len(tx_hashes)} transaction(s) for {address}")
        records = []
        for tx_hash in tx_hashes:
            record = self.rest_client.wait_for_confirmation(tx_hash, timeout=wait_timeout)
            if not record.success:
                raise FundingError(f"Funding transaction {tx_hash} failed on-chain: {record.vm_status}")
            records.append(record)
        return records
